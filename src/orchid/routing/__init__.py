"""Routing: priority-ordered route table with four pattern forms.

Routes are registered during bootstrap and scanned in priority order
on every dispatch.
"""
