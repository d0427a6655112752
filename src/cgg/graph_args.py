"""Accumulate rrdtool DEF/LINE arguments, split across output images.

GraphArguments holds one FileSlot per output image. Plugins push series into
the current slot or open a new one; slots and the series inside them are
append-only.
"""

import re
from dataclasses import dataclass, field
from typing import Optional

from .locator import Target
from . import log

# Argument shapes produced by DrawInstruction
_DEF_RE = re.compile(r'^DEF:(?P<name>[^=]+)=(?P<path>.*):value:AVERAGE$', re.DOTALL)
_LINE_RE = re.compile(
    r'^LINE(?P<thickness>\d+):(?P<name>[^#]+)(?P<color>#[0-9A-Fa-f]{6,8}):"(?P<legend>.*)"$',
    re.DOTALL,
)


@dataclass(frozen=True, slots=True)
class DrawInstruction:
    """One series on a graph: a DEF binding plus the LINE that draws it.

    Attributes:
        symbolic_name: vname shared by the DEF and LINE arguments
        legend: Legend text, may contain spaces
        color: Line color, e.g. "#e6194b"
        thickness: LINE width code (3 for processes, 5 for memory)
        source_path: Path to the RRD file
        quoted: Wrap source_path in double quotes (needed when the command
            goes through a remote shell)
    """

    symbolic_name: str
    legend: str
    color: str
    thickness: int
    source_path: str
    quoted: bool = False

    @property
    def definition(self) -> str:
        quote = '"' if self.quoted else ""
        return f"DEF:{self.symbolic_name}={quote}{self.source_path}{quote}:value:AVERAGE"

    @property
    def render_line(self) -> str:
        return f'LINE{self.thickness}:{self.symbolic_name}{self.color}:"{self.legend}"'

    def as_args(self) -> list[str]:
        return [self.definition, self.render_line]


def parse_draw_instruction(definition: str, render_line: str) -> DrawInstruction:
    """
    Parse a DEF/LINE argument pair back into a DrawInstruction.

    Raises:
        ValueError: if either argument is not in the form push() generates,
            or the two refer to different vnames
    """
    def_match = _DEF_RE.match(definition)
    if def_match is None:
        raise ValueError(f"Not a DEF argument: {definition!r}")
    line_match = _LINE_RE.match(render_line)
    if line_match is None:
        raise ValueError(f"Not a LINE argument: {render_line!r}")
    if def_match.group("name") != line_match.group("name"):
        raise ValueError(
            f"DEF/LINE name mismatch: {def_match.group('name')!r} "
            f"!= {line_match.group('name')!r}"
        )

    path = def_match.group("path")
    quoted = len(path) >= 2 and path.startswith('"') and path.endswith('"')
    if quoted:
        path = path[1:-1]

    return DrawInstruction(
        symbolic_name=def_match.group("name"),
        legend=line_match.group("legend"),
        color=line_match.group("color"),
        thickness=int(line_match.group("thickness")),
        source_path=path,
        quoted=quoted,
    )


@dataclass
class FileSlot:
    """Ordered draw instructions destined for one output image."""

    instructions: list[DrawInstruction] = field(default_factory=list)

    def __len__(self) -> int:
        return len(self.instructions)

    def symbolic_names(self) -> list[str]:
        return [instr.symbolic_name for instr in self.instructions]

    def args(self) -> list[str]:
        """Flatten into DEF, LINE, DEF, LINE, ..."""
        args: list[str] = []
        for instr in self.instructions:
            args.extend(instr.as_args())
        return args


class GraphArguments:
    """Per-image DEF/LINE arguments shared by all plugins of one run."""

    def __init__(self, target: Target):
        self.target = target
        self.slots: list[FileSlot] = []

    def __len__(self) -> int:
        return len(self.slots)

    def new_graph(self) -> FileSlot:
        """Start a new output image; following pushes land in it."""
        slot = FileSlot()
        self.slots.append(slot)
        return slot

    def push(
        self,
        legend_name: str,
        color: str,
        thickness: int,
        path: str,
        slot: Optional[int] = None,
    ) -> DrawInstruction:
        """
        Add a series to the current slot, or to slot number ``slot``.

        The vname is the first word of the legend so legends with spaces
        still produce valid arguments. When that word is already used in the
        same slot, the series' slot-local index is appended (``rust_1``).

        Args:
            legend_name: Legend text
            color: Line color
            thickness: LINE width code
            path: RRD file path
            slot: Slot index; slots up to it are created when missing

        Returns:
            The DrawInstruction that was appended
        """
        words = legend_name.split()
        if not words:
            raise ValueError("legend name must contain at least one word")

        if slot is None:
            if not self.slots:
                self.new_graph()
            slot = len(self.slots) - 1
            target_slot = self.slots[slot]
        else:
            if slot < 0:
                raise IndexError(f"negative slot index: {slot}")
            while len(self.slots) <= slot:
                self.new_graph()
            target_slot = self.slots[slot]

        index = len(target_slot)
        taken = target_slot.symbolic_names()
        name = words[0]
        suffix = index
        while name in taken:
            name = f"{words[0]}_{suffix}"
            suffix += 1

        instr = DrawInstruction(
            symbolic_name=name,
            legend=legend_name,
            color=color,
            thickness=thickness,
            source_path=path,
            quoted=self.target is Target.REMOTE,
        )
        target_slot.instructions.append(instr)

        log.debug(
            f"Pushed GraphArguments[{slot}][{index}]: "
            f"{instr.definition} {instr.render_line}"
        )
        return instr

    def args(self) -> list[list[str]]:
        """DEF/LINE arguments per slot."""
        return [slot.args() for slot in self.slots]
