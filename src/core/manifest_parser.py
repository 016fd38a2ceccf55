"""Parser for package manifests (mod install files).

A manifest is a line-oriented token stream with case-insensitive markers::

    NAME
    Blue Planet
    DESC
    Free-form description,
    any number of lines
    ENDDESC
    FOLDER
    /BluePlanet
    VERSION
    1.2
    URL
    https://example.org/bp/bp_core.7z
    EXEC
    setup.sh
        NAME
        Blue Planet Voice Pack
        ...
        END
    END

Nested NAME blocks are children of the enclosing node. Lines starting with
'#' outside DESC/NOTE blocks are comments.
"""
from pathlib import Path
from typing import List, Union

from utils.file_utils import read_text_file_cleanly
from .errors import ManifestParseError
from .mod_node import ModNode


SINGLE_VALUE_FIELDS = {'FOLDER': 'folder', 'VERSION': 'version'}
REPEATED_FIELDS = {'URL': 'urls', 'EXEC': 'exec_commands'}
TEXT_BLOCKS = {'DESC': ('ENDDESC', 'description'), 'NOTE': ('ENDNOTE', 'note')}


class _ManifestReader:
    
    def __init__(self, lines: List[str]):
        self.lines = lines
        self.pos = 0
    
    def at_end(self) -> bool:
        return self.pos >= len(self.lines)
    
    def next_line(self, expected):
        if self.at_end():
            raise ManifestParseError(f"unexpected end of file, expected {expected}", len(self.lines))
        line = self.lines[self.pos]
        self.pos += 1
        return line
    
    def next_token(self, expected):
        """Next non-comment line."""
        while True:
            line = self.next_line(expected)
            if not line.startswith('#'):
                return line
    
    def skip_comments(self):
        while not self.at_end() and self.lines[self.pos].startswith('#'):
            self.pos += 1
    
    def read_node(self) -> ModNode:
        name = self.next_token("a mod name")
        if name.upper() in ('END', 'NAME'):
            raise ManifestParseError(f"missing mod name before '{name}'", self.pos)
        node = ModNode(name)
        
        while True:
            marker = self.next_token(f"END for '{name}'")
            key = marker.upper()
            if key == 'END':
                return node
            elif key == 'NAME':
                node.add_child(self.read_node())
            elif key in SINGLE_VALUE_FIELDS:
                setattr(node, SINGLE_VALUE_FIELDS[key], self.next_token(f"a value for {key}"))
            elif key in REPEATED_FIELDS:
                getattr(node, REPEATED_FIELDS[key]).append(self.next_token(f"a value for {key}"))
            elif key in TEXT_BLOCKS:
                end_marker, attribute = TEXT_BLOCKS[key]
                text = []
                while True:
                    line = self.next_line(end_marker)
                    if line.upper() == end_marker:
                        break
                    text.append(line)
                setattr(node, attribute, "\n".join(text))
            else:
                raise ManifestParseError(f"unknown marker '{marker}' in '{name}'", self.pos)


def parse_manifest_lines(lines: List[str]) -> List[ModNode]:
    """Parse manifest lines into zero or more top-level ModNode trees."""
    reader = _ManifestReader(lines)
    nodes = []
    while True:
        reader.skip_comments()
        if reader.at_end():
            return nodes
        marker = reader.next_token("NAME")
        if marker.upper() != 'NAME':
            raise ManifestParseError(f"expected NAME, found '{marker}'", reader.pos)
        nodes.append(reader.read_node())


def read_install_file(path: Union[str, Path]) -> List[ModNode]:
    """Parse a downloaded manifest file. Raises ManifestParseError or OSError."""
    return parse_manifest_lines(read_text_file_cleanly(path))
