import mimetypes

import markdown
from orgpython import to_html as org_export

from ..utils.common import bytes_to_str
from .models import DEFAULT_CONTENT_TYPE, Html, MarkupKind, Raw


# Fenced code blocks are core CommonMark; Python-Markdown ships them as an extension.
MARKDOWN_EXTENSIONS = ["fenced_code"]

# Compressed formats that mimetypes reports as encodings rather than types.
EXTRA_CONTENT_TYPES = {
    "gz": "application/gzip",
    "tgz": "application/gzip",
    "bz2": "application/x-bzip2",
    "xz": "application/x-xz",
    "zst": "application/zstd",
}



def md_to_html(text: str) -> str:
    return markdown.markdown(text, extensions=MARKDOWN_EXTENSIONS)


def org_to_html(text: str) -> str:
    return org_export(text, toc=False, offset=0, highlight=False)


def guess_content_type(extension: str) -> str:
    if not extension:
        return DEFAULT_CONTENT_TYPE

    extension = extension.lower()
    if extension in EXTRA_CONTENT_TYPES:
        return EXTRA_CONTENT_TYPES[extension]

    content_type, _ = mimetypes.guess_type(f"entry.{extension}", strict=False)
    return content_type or DEFAULT_CONTENT_TYPE




class ContentRenderer:
    def render(self, data: bytes, extension: str) -> Html | Raw:
        kind = MarkupKind.from_extension(extension)

        match kind:
            case MarkupKind.MARKDOWN:
                return Html(md_to_html(bytes_to_str(data)))
            case MarkupKind.ORG:
                return Html(org_to_html(bytes_to_str(data)))
            case MarkupKind.HTML_PASSTHROUGH:
                return Html(bytes_to_str(data))
            case MarkupKind.OTHER:
                return Raw(bytes(data), guess_content_type(extension))
