"""SceneryWriter contract and the bundled writers.

The translator talks to exactly one writer per tile:

1. ``init(tile)``          - start a tile.
2. ``set_header(text)``    - may be called again when the input bbox arrives.
3. ``write(request)``      - once per emission request, in order.
4. ``complete(trailer)``   - end of the tile; ``trailer`` holds exclusions.

``MemoryWriter`` keeps everything in memory (tests, previews).
``DsfTextFileWriter`` renders DSF2Text to ``<output_dir>/<tile>.txt``.
"""

from __future__ import annotations

import abc
import logging
from pathlib import Path

from osm_scenery.core.exceptions import EmissionError
from osm_scenery.models.emission import EmissionRequest
from osm_scenery.output.dsf_format import DsfTextFormat, tile_label

logger = logging.getLogger("osm_scenery.output.writer")


class SceneryWriter(abc.ABC):
    """Abstract output sink for one tile."""

    def init(self, tile: tuple[int, int] | None) -> None:  # noqa: B027
        """Start a tile (optional hook)."""

    @abc.abstractmethod
    def set_header(self, header: str) -> None:
        """Replace the tile header."""

    @abc.abstractmethod
    def write(self, request: EmissionRequest) -> None:
        """Append one emission request.

        Raises:
            EmissionError: If the request cannot be written.
        """

    @abc.abstractmethod
    def complete(self, trailer: str | None) -> None:
        """Finish the tile, appending ``trailer`` if given."""


class MemoryWriter(SceneryWriter):
    """Collects requests and rendered text in memory."""

    def __init__(self, text_format: DsfTextFormat | None = None) -> None:
        self._format = text_format or DsfTextFormat()
        self.tile: tuple[int, int] | None = None
        self.header = ""
        self.requests: list[EmissionRequest] = []
        self.lines: list[str] = []
        self.trailer: str | None = None
        self.completed = False

    def init(self, tile: tuple[int, int] | None) -> None:
        self.tile = tile

    def set_header(self, header: str) -> None:
        self.header = header

    def write(self, request: EmissionRequest) -> None:
        self.requests.append(request)
        self.lines.append(self._format.render(request))

    def complete(self, trailer: str | None) -> None:
        self.trailer = trailer
        self.completed = True

    def text(self) -> str:
        """Full DSF2Text document.

        Exclusion properties from the trailer go after the header
        properties, before the definition tables.
        """
        properties, marker, definitions = self.header.partition("NETWORK_DEF")
        return properties + (self.trailer or "") + marker + definitions + "".join(self.lines)

    def payloads_of(self, payload_type: type) -> list[object]:
        return [r.payload for r in self.requests if isinstance(r.payload, payload_type)]


class DsfTextFileWriter(MemoryWriter):
    """Buffers a tile and writes it as a DSF2Text file on completion."""

    def __init__(self, output_dir: str | Path, text_format: DsfTextFormat | None = None) -> None:
        super().__init__(text_format)
        self._output_dir = Path(output_dir)
        self.path: Path | None = None

    def complete(self, trailer: str | None) -> None:
        super().complete(trailer)
        if not self.requests:
            logger.info("Nothing generated, skipping file | tile=%s", tile_label(self.tile))
            return
        self.path = self._output_dir / f"{tile_label(self.tile)}.txt"
        try:
            self._output_dir.mkdir(parents=True, exist_ok=True)
            self.path.write_text(self.text(), encoding="utf-8")
        except OSError as exc:
            raise EmissionError(f"Cannot write {self.path}: {exc}") from exc
        logger.info("DSF text written | tile=%s | path=%s", tile_label(self.tile), self.path)
