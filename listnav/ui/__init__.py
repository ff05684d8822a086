"""UI package for listnav.

Textual widgets that adapt the list navigation presenters to the terminal:

- SearchDropdown: searchable single-select list with highlighted matches
- PaginatorBar: window of page buttons
"""
