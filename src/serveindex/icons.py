"""Icon catalog, lookup and per-response icon CSS.

Icon images ship with the package under ``public/icons``. Each image is read
and base64-encoded once per process; the catalog is fixed, so the cache never
needs eviction.
"""

from __future__ import annotations

import base64
import mimetypes
import os
from collections.abc import Iterable
from functools import lru_cache
from pathlib import Path
from types import MappingProxyType
from typing import NamedTuple

from serveindex.listing import Entry

ICONS_DIR = Path(__file__).parent / "public" / "icons"

# Built-in type map only; the host's mime.types files do not affect icons.
_MIME_TYPES = mimetypes.MimeTypes()

ICONS = MappingProxyType(
    {
        # base icons
        "default": "page_white.png",
        "folder": "folder.png",
        # generic mime type icons
        "font": "font.png",
        "image": "image.png",
        "text": "page_white_text.png",
        "video": "film.png",
        # generic mime suffix icons
        "+json": "page_white_code.png",
        "+xml": "page_white_code.png",
        "+zip": "box.png",
        # specific mime type icons
        "application/javascript": "page_white_code_red.png",
        "application/json": "page_white_code.png",
        "application/msword": "page_white_word.png",
        "application/pdf": "page_white_acrobat.png",
        "application/postscript": "page_white_vector.png",
        "application/rtf": "page_white_word.png",
        "application/vnd.ms-excel": "page_white_excel.png",
        "application/vnd.ms-powerpoint": "page_white_powerpoint.png",
        "application/vnd.oasis.opendocument.presentation": "page_white_powerpoint.png",
        "application/vnd.oasis.opendocument.spreadsheet": "page_white_excel.png",
        "application/vnd.oasis.opendocument.text": "page_white_word.png",
        "application/x-7z-compressed": "box.png",
        "application/x-sh": "application_xp_terminal.png",
        "application/x-msaccess": "page_white_database.png",
        "application/x-shockwave-flash": "page_white_flash.png",
        "application/x-sql": "page_white_database.png",
        "application/x-tar": "box.png",
        "application/x-xz": "box.png",
        "application/xml": "page_white_code.png",
        "application/zip": "box.png",
        "image/svg+xml": "page_white_vector.png",
        "text/css": "page_white_code.png",
        "text/html": "page_white_code.png",
        "text/javascript": "page_white_code_red.png",
        "text/less": "page_white_code.png",
        # other, extension-specific icons
        ".accdb": "page_white_database.png",
        ".apk": "box.png",
        ".app": "application_xp.png",
        ".as": "page_white_actionscript.png",
        ".asp": "page_white_code.png",
        ".aspx": "page_white_code.png",
        ".bat": "application_xp_terminal.png",
        ".bz2": "box.png",
        ".c": "page_white_c.png",
        ".cab": "box.png",
        ".cfm": "page_white_coldfusion.png",
        ".clj": "page_white_code.png",
        ".cc": "page_white_cplusplus.png",
        ".cgi": "application_xp_terminal.png",
        ".cpp": "page_white_cplusplus.png",
        ".cs": "page_white_csharp.png",
        ".db": "page_white_database.png",
        ".dbf": "page_white_database.png",
        ".deb": "box.png",
        ".dll": "page_white_gear.png",
        ".dmg": "drive.png",
        ".docx": "page_white_word.png",
        ".erb": "page_white_ruby.png",
        ".exe": "application_xp.png",
        ".fnt": "font.png",
        ".gam": "controller.png",
        ".gz": "box.png",
        ".h": "page_white_h.png",
        ".ini": "page_white_gear.png",
        ".iso": "cd.png",
        ".jar": "box.png",
        ".java": "page_white_cup.png",
        ".jsp": "page_white_cup.png",
        ".lua": "page_white_code.png",
        ".lz": "box.png",
        ".lzma": "box.png",
        ".m": "page_white_code.png",
        ".map": "map.png",
        ".msi": "box.png",
        ".mv4": "film.png",
        ".pdb": "page_white_database.png",
        ".php": "page_white_php.png",
        ".pl": "page_white_code.png",
        ".pkg": "box.png",
        ".pptx": "page_white_powerpoint.png",
        ".psd": "page_white_picture.png",
        ".py": "page_white_code.png",
        ".rar": "box.png",
        ".rb": "page_white_ruby.png",
        ".rm": "film.png",
        ".rom": "controller.png",
        ".rpm": "box.png",
        ".sass": "page_white_code.png",
        ".sav": "controller.png",
        ".scss": "page_white_code.png",
        ".srt": "page_white_text.png",
        ".tbz2": "box.png",
        ".tgz": "box.png",
        ".tlz": "box.png",
        ".vb": "page_white_code.png",
        ".vbs": "page_white_code.png",
        ".xcf": "page_white_picture.png",
        ".xlsx": "page_white_excel.png",
        ".yaws": "page_white_code.png",
    }
)


class Icon(NamedTuple):
    class_name: str
    file_name: str


DEFAULT_ICON = Icon("icon-default", ICONS["default"])
DIRECTORY_ICON = Icon("icon-directory", ICONS["folder"])


def _mime_type(ext: str) -> str | None:
    if not ext:
        return None
    return _MIME_TYPES.guess_type(f"file{ext.lower()}")[0]


def icon_lookup(filename: str) -> Icon:
    """Find the icon for *filename*.

    Tries the extension, then its MIME type, the MIME ``+suffix``, the MIME
    supertype, and finally falls back to the default icon.
    """
    ext = os.path.splitext(filename)[1]

    if ext in ICONS:
        return Icon(f"icon-{ext[1:]}", ICONS[ext])

    mimetype = _mime_type(ext)
    if mimetype is None:
        return DEFAULT_ICON

    if mimetype in ICONS:
        return Icon("icon-" + mimetype.replace("/", "-", 1).replace("+", "_", 1), ICONS[mimetype])

    _, _, suffix = mimetype.partition("+")
    if suffix and f"+{suffix}" in ICONS:
        return Icon(f"icon-{suffix}", ICONS[f"+{suffix}"])

    supertype = mimetype.split("/", 1)[0]
    if supertype in ICONS:
        return Icon(f"icon-{supertype}", ICONS[supertype])

    return DEFAULT_ICON


@lru_cache(maxsize=None)
def load_icon(file_name: str) -> str:
    """Base64 contents of a bundled icon image."""
    return base64.b64encode((ICONS_DIR / file_name).read_bytes()).decode("ascii")


def entry_icon(entry: Entry) -> Icon:
    return DIRECTORY_ICON if entry.is_dir else icon_lookup(entry.name)


def icon_style(entries: Iterable[Entry], use_icons: bool) -> str:
    """CSS for the icons used by *entries*, one rule per distinct image."""
    if not use_icons:
        return ""

    selectors: dict[str, list[str]] = {}
    for entry in entries:
        icon = entry_icon(entry)
        selector = f"#files .{icon.class_name} .name"
        group = selectors.setdefault(icon.file_name, [])
        if selector not in group:
            group.append(selector)

    style = ""
    for file_name, group in selectors.items():
        rule = f"background-image: url(data:image/png;base64,{load_icon(file_name)});"
        style += ",\n".join(group) + " {\n  " + rule + "\n}\n"
    return style
