"""
Document model adapter over BeautifulSoup.

One PageDocument per check: built from the fetched HTML, queried, never
mutated. Whole-page searches run against the raw HTML so quoting and query
strings are preserved exactly; head/body/script queries go through the parse
tree.
"""
from functools import cached_property

from bs4 import BeautifulSoup
from bs4.element import Tag

_PARSER = "html.parser"


class PageDocument:
    def __init__(self, html: str):
        self.html = html or ""
        self.soup = BeautifulSoup(self.html, _PARSER)

    def serialize(self) -> str:
        return str(self.soup)

    @cached_property
    def lower_html(self) -> str:
        return self.html.lower()

    @cached_property
    def head_html(self) -> str:
        head = self.soup.head
        return head.decode_contents() if head else ""

    @cached_property
    def body_html(self) -> str:
        body = self.soup.body
        return body.decode_contents() if body else ""

    def external_scripts(self) -> list[tuple[str, Tag]]:
        """(src, element) for every <script src=...>, in document order."""
        return [
            (script["src"], script)
            for script in self.soup.find_all("script", src=True)
            if script["src"]
        ]

    def inline_scripts(self) -> list[str]:
        return [
            script.decode_contents()
            for script in self.soup.find_all("script")
            if not script.get("src")
        ]

    def in_head(self, tag: Tag) -> bool:
        return tag.find_parent("head") is not None


def parse_html(html: str) -> PageDocument:
    return PageDocument(html)


def canonical_fragment(fragment: str) -> str:
    """Round-trip markup through the parser so it serializes like head/body content."""
    return str(BeautifulSoup(fragment, _PARSER))
