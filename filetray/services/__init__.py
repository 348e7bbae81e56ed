"""Services package.

Holds the collection manager that owns accepted files. The HTTP routes in
`filetray/api/routes.py` stay thin and delegate every decision to it.
"""

from .file_collection import FileCollection  # noqa: F401
