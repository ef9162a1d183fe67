"""ValueAdapter: immutable rich-text values rebuilt on every write."""

from __future__ import annotations

from typing import Iterator

from bs4 import BeautifulSoup, NavigableString, Tag

from citeweaver.adapters.protocol import DocumentAdapter, Span
from citeweaver.adapters.utils import is_text, iter_offsets, parse_fragment, tag_attributes, tag_classes, text_length
from citeweaver.errors import AdapterError
from citeweaver.models.formats import FormatRegistry
from citeweaver.models.richtext import FormatRun, RichTextValue


class ValueAdapter(DocumentAdapter[RichTextValue]):
    """Backend over `RichTextValue`.

    Callers must replace their reference with the value returned by every write.
    """

    name = "value"

    def __init__(self, registry: FormatRegistry, *, parser: str = "html.parser") -> None:
        super().__init__(registry)
        self.parser = parser

    def parse(self, html: str) -> RichTextValue:
        soup = parse_fragment(html, self.parser)
        parts: list[str] = []
        runs: list[FormatRun] = []
        for node, offset in iter_offsets(soup):
            if isinstance(node, Tag):
                runs.append(
                    FormatRun(
                        type=self.registry.match(tag_classes(node)) or node.name,
                        tag=node.name,
                        start=offset,
                        end=offset + text_length(node),
                        depth=sum(1 for _ in node.parents) - 1,
                        attributes=tag_attributes(node),
                    )
                )
            elif is_text(node):
                parts.append(str(node))
        return RichTextValue(text="".join(parts), formats=tuple(runs))

    def serialize(self, doc: RichTextValue) -> str:
        soup = BeautifulSoup("", self.parser)
        stack: list[tuple[FormatRun | None, Tag]] = [(None, soup)]
        pos = 0

        def emit(upto: int) -> None:
            nonlocal pos
            if upto > pos:
                stack[-1][1].append(NavigableString(doc.text[pos:upto]))
                pos = upto

        for run in doc.formats:
            while len(stack) - 1 > run.depth:
                emit(stack[-1][0].end)  # type: ignore[union-attr]
                stack.pop()
            emit(run.start)
            tag = soup.new_tag(run.tag, attrs=dict(run.attributes))
            stack[-1][1].append(tag)
            stack.append((run, tag))

        while len(stack) > 1:
            emit(stack[-1][0].end)  # type: ignore[union-attr]
            stack.pop()
        emit(len(doc.text))
        return soup.decode()

    def text_length(self, doc: RichTextValue) -> int:
        return len(doc.text)

    def spans(self, doc: RichTextValue) -> Iterator[Span]:
        names = self.registry.names
        for i, run in enumerate(doc.formats):
            if run.type in names:
                yield Span(format_name=run.type, start=run.start, end=run.end, key=i)

    def attributes(self, doc: RichTextValue, span: Span) -> dict[str, str]:
        return dict(self._resolve(doc, span).attributes)

    def set_attributes(self, doc: RichTextValue, span: Span, attributes: dict[str, str]) -> RichTextValue:
        run = self._resolve(doc, span)
        formats = list(doc.formats)
        formats[span.key] = run.model_copy(update={"attributes": dict(attributes)})
        return doc.model_copy(update={"formats": tuple(formats)})

    def insert_at(self, doc: RichTextValue, position: int, html: str) -> RichTextValue:
        self.check_position(doc, position)
        fragment = self.parse(html)
        n = len(fragment.text)
        cut, containers = self._insertion_point(doc, position)

        formats: list[FormatRun] = []
        for i, run in enumerate(doc.formats[:cut]):
            if i in containers:
                run = run.model_copy(update={"end": run.end + n})
            formats.append(run)
        depth = len(containers)
        for run in fragment.formats:
            formats.append(
                run.model_copy(
                    update={"start": run.start + position, "end": run.end + position, "depth": run.depth + depth}
                )
            )
        for run in doc.formats[cut:]:
            formats.append(run.model_copy(update={"start": run.start + n, "end": run.end + n}))
        return RichTextValue(
            text=doc.text[:position] + fragment.text + doc.text[position:],
            formats=tuple(formats),
        )

    def remove(self, doc: RichTextValue, span: Span) -> RichTextValue:
        target = self._resolve(doc, span)
        start, end = target.start, target.end
        n = end - start
        # Runs nested in the removed one go with it
        stop = _subtree_end(doc.formats, span.key)

        def shift(x: int) -> int:
            if x <= start:
                return x
            if x <= end:
                return start
            return x - n

        formats: list[FormatRun] = []
        for i, run in enumerate(doc.formats):
            if span.key <= i < stop:
                continue
            formats.append(run.model_copy(update={"start": shift(run.start), "end": shift(run.end)}))
        return RichTextValue(text=doc.text[:start] + doc.text[end:], formats=tuple(formats))

    def _insertion_point(self, doc: RichTextValue, position: int) -> tuple[int, list[int]]:
        """Where new runs go in `doc.formats`, and which runs grow around them.

        Inside the text, new content lands before the character at `position`; at the end
        it lands after the last character. Either way it stays outside a registered format
        that begins (or ends) exactly there, as `TreeAdapter` does.
        """

        runs = doc.formats
        length = len(doc.text)
        if length == 0:
            return len(runs), []

        names = self.registry.names
        if position < length:
            chain = [i for i, r in enumerate(runs) if r.start <= position < r.end]
            for k, i in enumerate(chain):
                if runs[i].start == position and runs[i].type in names:
                    return i, chain[:k]
            return sum(1 for r in runs if r.start <= position), chain

        chain = [i for i, r in enumerate(runs) if r.start < length and r.end == length]
        for k, i in enumerate(chain):
            if runs[i].type in names:
                return _subtree_end(runs, i), chain[:k]
        return sum(1 for r in runs if r.start < length), chain

    @staticmethod
    def _resolve(doc: RichTextValue, span: Span) -> FormatRun:
        i = span.key
        if not isinstance(i, int) or not 0 <= i < len(doc.formats):
            raise AdapterError(f"span {span!r} is not part of this value")
        run = doc.formats[i]
        if run.type != span.format_name or run.start != span.start or run.end != span.end:
            raise AdapterError(f"span {span!r} is stale for this value")
        return run


def _subtree_end(runs: tuple[FormatRun, ...], index: int) -> int:
    """Index just past the run at `index` and everything nested in it."""

    depth = runs[index].depth
    end = index + 1
    while end < len(runs) and runs[end].depth > depth:
        end += 1
    return end
