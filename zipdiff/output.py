"""
Renderers writing a DifferenceResult as text, XML or HTML.
"""

from __future__ import annotations

import datetime
import io
import os
import xml.etree.ElementTree as ET
from abc import ABC, abstractmethod
from html import escape
from typing import BinaryIO, Iterable, Optional, Union

from zipdiff.diff_data import DifferenceResult

DEFAULT_FILENAME1 = 'filename1.zip'
DEFAULT_FILENAME2 = 'filename2.zip'

ENCODING = 'utf-8'


class DiffRenderer(ABC):
    """
    Base class of all renderers.
    """

    @abstractmethod
    def render(self, result: DifferenceResult, output: BinaryIO) -> None:
        """
        Writes the result to the given stream.

        :param result: Comparison result.
        :param output: Writable binary stream.
        """
        raise NotImplementedError()

    def render_to_file(self, result: DifferenceResult, path: Union[str, os.PathLike]) -> None:
        """
        Writes the result to the file at the given path, replacing its contents.
        """
        with open(path, 'wb') as output:
            self.render(result, output)

    def render_to_bytes(self, result: DifferenceResult) -> bytes:
        """
        :return: The rendered result.
        """
        buffer = io.BytesIO()
        self.render(result, buffer)
        return buffer.getvalue()


def _count_phrase(count: int, singular: str, plural: str) -> str:
    return f'1 {singular}' if count == 1 else f'{count} {plural}'


class TextRenderer(DiffRenderer):
    """
    Human-readable summary with one line per entry.
    """

    def format(self, result: DifferenceResult) -> str:
        """
        :param result: Comparison result.
        :return: The summary as string.
        """
        filename2 = result.source_label2 or DEFAULT_FILENAME2
        lines = [f'{_count_phrase(len(result.added), "file was", "files were")}'
                 f' added to {filename2}']
        lines += [f'\t[added] {name}' for name in result.sorted_names('added')]

        lines.append(f'{_count_phrase(len(result.removed), "file was", "files were")}'
                     f' removed from {filename2}')
        lines += [f'\t[removed] {name}' for name in result.sorted_names('removed')]

        lines.append(f'{_count_phrase(len(result.changed), "file", "files")} changed')
        for name in result.sorted_names('changed'):
            entry1, entry2 = result.changed[name]
            lines.append(f'\t[changed] {name}  ( size {entry1.uncompressed_size}'
                         f' : {entry2.uncompressed_size} )')

        lines.append(f'Total differences: {result.total_differences()}')
        return '\n'.join(lines) + '\n'

    def render(self, result: DifferenceResult, output: BinaryIO) -> None:
        output.write(self.format(result).encode(ENCODING))


class XmlRenderer(DiffRenderer):
    """
    XML document with a `zipdiff` root and one element per differing entry.
    """

    def build_tree(self, result: DifferenceResult) -> ET.ElementTree:
        """
        :param result: Comparison result.
        :return: The document tree.
        """
        root = ET.Element('zipdiff', {
            'filename1': result.source_label1 or DEFAULT_FILENAME1,
            'filename2': result.source_label2 or DEFAULT_FILENAME2,
        })
        differences = ET.SubElement(root, 'differences')
        for partition in ('added', 'removed', 'changed'):
            for name in result.sorted_names(partition):
                ET.SubElement(differences, partition).text = name

        tree = ET.ElementTree(root)
        ET.indent(tree)
        return tree

    def render(self, result: DifferenceResult, output: BinaryIO) -> None:
        self.build_tree(result).write(output, encoding='UTF-8', xml_declaration=True)
        output.write(b'\n')


_HTML_STYLE = '''<style type="text/css">
 body, p {
  font-family: verdana,arial,helvetica;
  font-size: 80%;
  color:#000000;
 }
 .diffs {
  font-family: verdana,arial,helvetica;
  font-size: 80%;
  font-weight: bold;
  text-align:left;
  background:#a6caf0;
 }
 tr, td {
  font-family: verdana,arial,helvetica;
  font-size: 80%;
  background:#eeeee0;
 }
</style>'''


class HtmlRenderer(DiffRenderer):
    """
    Styled HTML page listing the added, removed and changed entries.
    """

    def __init__(self, generated_at: Optional[datetime.datetime] = None):
        """
        :param generated_at: Timestamp shown in the page footer, defaults to the rendering time.
        """
        self.generated_at = generated_at

    def _diff_section(self, title: str, names: Iterable[str]) -> str:
        names = list(names)
        lines = [
            '<table cellspacing="1" cellpadding="3" width="100%" border="0">',
            '<tr>',
            f'<td class="diffs" colspan="2">{title} ({len(names)} entries)</td>',
            '</tr>',
            '<tr>',
            '<td width="20">',
            '</td>',
            '<td>',
        ]
        if names:
            lines.append('<ul>')
            lines += [f'<li>{escape(name)}</li>' for name in names]
            lines.append('</ul>')
        lines += ['</td>', '</tr>', '</table>']
        return '\n'.join(lines)

    def format(self, result: DifferenceResult) -> str:
        """
        :param result: Comparison result.
        :return: The page as string.
        """
        generated_at = self.generated_at or datetime.datetime.now()
        filename1 = escape(result.source_label1 or DEFAULT_FILENAME1)
        filename2 = escape(result.source_label2 or DEFAULT_FILENAME2)
        parts = [
            '<html>',
            '<head>',
            f'<meta http-equiv="Content-Type" content="text/html; charset={ENCODING}">',
            '<title>File differences</title>',
            _HTML_STYLE,
            '</head>',
            '<body text="#000000" vlink="#000000" alink="#000000" link="#000000">',
            f'<p>First file: {filename1}<br>',
            f'Second file: {filename2}</p>',
            self._diff_section('Added', result.sorted_names('added')),
            self._diff_section('Removed', result.sorted_names('removed')),
            self._diff_section('Changed', result.sorted_names('changed')),
            '<hr>',
            '<p>',
            f'Generated at {generated_at:%Y-%m-%d %H:%M:%S}',
            '</p>',
            '</body>',
            '</html>',
        ]
        return '\n'.join(parts) + '\n'

    def render(self, result: DifferenceResult, output: BinaryIO) -> None:
        output.write(self.format(result).encode(ENCODING))


def renderer_for_destination(destination: Union[str, os.PathLike]) -> DiffRenderer:
    """
    Selects the renderer by the suffix of the destination: '.html' renders HTML, '.xml' renders XML
    and everything else plain text.

    :param destination: Output file name.
    :return: Matching renderer.
    """
    name = os.fspath(destination).lower()
    if name.endswith('.html'):
        return HtmlRenderer()
    if name.endswith('.xml'):
        return XmlRenderer()
    return TextRenderer()


RENDERERS = {
    'text': TextRenderer,
    'xml': XmlRenderer,
    'html': HtmlRenderer,
}


def write_diff(result: DifferenceResult, destination: Union[str, os.PathLike]) -> None:
    """
    Writes the result to the destination file in the format selected by its suffix.

    :param result: Comparison result.
    :param destination: Output file name.
    """
    renderer_for_destination(destination).render_to_file(result, destination)
