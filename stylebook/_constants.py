"""Common literal values used across stylebook.

These constants keep reserved front-matter fields and layout markers
centralized so loaders, the assembler, and tests import the same values without
drifting. Intended for internal use within the stylebook package.

Examples
--------
>>> from stylebook import _constants
>>> _constants.NOTES_FIELD
'notes'
>>> bool(_constants.BODY_MARKER.search("<main>{% body %}</main>"))
True
"""

import re

NOTES_FIELD = "notes"
ORDER_FIELD = "order"
LAYOUT_FIELD = "layout"
DEST_FIELD = "dest"
DEST_COPY_FIELD = "dest-copy"
BASEURL_FIELD = "baseurl"
SUBCOLLECTION_BASEURL = ".."

BODY_MARKER = re.compile(r"\{%\s?body\s?%\}")
