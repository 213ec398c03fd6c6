"""Pager engine, local re-pagination and client-side re-sorting."""
