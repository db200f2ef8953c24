"""
Server-rendered pages

Each module registers a `router` of HTML routes. Pages are f-string shells
built by `_layout.page_shell`; forms POST back and are answered with a 303
redirect carrying a flash message in the query string.
"""
