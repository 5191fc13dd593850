"""Reading and writing raw RGB-D log files.

A log starts with an int32 frame count. Each frame then holds an int64
timestamp, the int32 sizes of the depth and colour payloads, the depth
payload and, if its size is positive, the colour payload. A payload whose
size equals the uncompressed size is stored raw; otherwise depth is
zlib-compressed and colour is a JPEG image.
"""

from __future__ import annotations

import io
import struct
import zlib
from collections.abc import Iterable
from dataclasses import dataclass
from os import PathLike
from types import TracebackType
from typing import BinaryIO

import numpy as np
from PIL import Image

from densemap.sync import SharedValue

_COUNT = struct.Struct("<i")
_FRAME_HEADER = struct.Struct("<qii")
_JPEG_QUALITY = 90


class LogFormatError(ValueError):
    """The log file is truncated or its contents are inconsistent."""


@dataclass(eq=False)
class Frame:
    """One frame: depth in millimetres (rows x cols) and a 3-channel image."""

    timestamp: int
    depth: np.ndarray
    image: np.ndarray | None = None
    is_compressed: bool = False


def _decode_jpeg(data: bytes, width: int, height: int) -> np.ndarray:
    try:
        with Image.open(io.BytesIO(data)) as img:
            pixels = np.asarray(img.convert("RGB"), dtype=np.uint8)
    except OSError as exc:
        raise LogFormatError("colour payload is not a readable image") from exc
    if pixels.shape != (height, width, 3):
        raise LogFormatError(
            f"decoded image is {pixels.shape[1]}x{pixels.shape[0]}, expected {width}x{height}"
        )
    # JPEG images in these logs carry their channels in reverse order.
    return np.ascontiguousarray(pixels[..., ::-1])


def _encode_jpeg(image: np.ndarray) -> bytes:
    buffer = io.BytesIO()
    Image.fromarray(np.ascontiguousarray(image[..., ::-1]), "RGB").save(
        buffer, format="JPEG", quality=_JPEG_QUALITY
    )
    return buffer.getvalue()


class RawLogReader:
    """Reads frames one at a time from a raw log file."""

    def __init__(
        self,
        path: str | PathLike[str],
        width: int,
        height: int,
        *,
        flip_colors: bool = False,
        total_num_frames: int = 0,
        frame_signal: SharedValue[int] | None = None,
    ) -> None:
        self.width = width
        self.height = height
        self.flip_colors = flip_colors
        self.frame_signal = frame_signal
        self._file: BinaryIO = open(path, "rb")
        try:
            (self.num_frames,) = _COUNT.unpack(self._read_exact(_COUNT.size))
        except BaseException:
            self._file.close()
            raise
        self.current_frame = 0
        self.total_num_frames = total_num_frames or self.num_frames
        self.frame: Frame | None = None

    @property
    def num_pixels(self) -> int:
        return self.width * self.height

    def _read_exact(self, size: int) -> bytes:
        data = self._file.read(size)
        if len(data) != size:
            raise LogFormatError(f"unexpected end of log: wanted {size} bytes, got {len(data)}")
        return data

    def has_more(self) -> bool:
        """Whether another frame may be read."""
        return self.current_frame + 1 < self.num_frames

    def read_next(self) -> Frame:
        """Read and decode the next frame."""
        timestamp, depth_size, image_size = _FRAME_HEADER.unpack(
            self._read_exact(_FRAME_HEADER.size)
        )
        if depth_size < 0:
            raise LogFormatError(f"negative depth size {depth_size}")
        depth_data = self._read_exact(depth_size)
        image_data = self._read_exact(image_size) if image_size > 0 else b""

        raw_image_size = self.num_pixels * 3
        raw_depth_size = self.num_pixels * 2

        if image_size == raw_image_size:
            is_compressed = False
            image = np.frombuffer(image_data, dtype=np.uint8).reshape(
                self.height, self.width, 3
            ).copy()
        elif image_size > 0:
            is_compressed = True
            image = _decode_jpeg(image_data, self.width, self.height)
        else:
            is_compressed = False
            image = np.zeros((self.height, self.width, 3), dtype=np.uint8)

        if depth_size == raw_depth_size:
            if is_compressed:
                raise LogFormatError("raw depth paired with a compressed image")
            depth_bytes = depth_data
        elif depth_size > 0:
            if not is_compressed:
                raise LogFormatError("compressed depth paired with a raw image")
            try:
                depth_bytes = zlib.decompress(depth_data)
            except zlib.error as exc:
                raise LogFormatError("depth payload is not valid zlib data") from exc
            if len(depth_bytes) != raw_depth_size:
                raise LogFormatError(
                    f"depth decompressed to {len(depth_bytes)} bytes, expected {raw_depth_size}"
                )
        else:
            is_compressed = False
            depth_bytes = bytes(raw_depth_size)

        depth = np.frombuffer(depth_bytes, dtype="<u2").astype(np.uint16).reshape(
            self.height, self.width
        )

        if self.flip_colors:
            image = np.ascontiguousarray(image[..., ::-1])

        self.current_frame += 1
        self.frame = Frame(timestamp, depth, image, is_compressed)
        return self.frame

    def grab_next(self, current_frame: int) -> Frame | None:
        """Read the next frame if one remains within the frame limit, else return None."""
        if self.has_more() and current_frame < self.total_num_frames:
            frame = self.read_next()
            if self.frame_signal is not None:
                self.frame_signal.assign_and_notify_all(current_frame)
            return frame
        return None

    def close(self) -> None:
        """Close the log file."""
        self._file.close()

    def __enter__(self) -> RawLogReader:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.close()


def write_log(
    path: str | PathLike[str], frames: Iterable[Frame], width: int, height: int
) -> None:
    """Write ``frames`` as a log; compressed frames use zlib depth and JPEG colour."""
    frames = list(frames)
    with open(path, "wb") as out:
        out.write(_COUNT.pack(len(frames)))
        for frame in frames:
            depth = np.asarray(frame.depth)
            if depth.shape != (height, width):
                raise ValueError(f"depth shape {depth.shape} does not match {width}x{height}")
            depth_bytes = depth.astype("<u2").tobytes()
            if frame.image is None:
                image_bytes = b""
            else:
                image = np.asarray(frame.image, dtype=np.uint8)
                if image.shape != (height, width, 3):
                    raise ValueError(
                        f"image shape {image.shape} does not match {width}x{height}x3"
                    )
                image_bytes = _encode_jpeg(image) if frame.is_compressed else image.tobytes()
            if frame.is_compressed:
                depth_bytes = zlib.compress(depth_bytes)
            out.write(_FRAME_HEADER.pack(frame.timestamp, len(depth_bytes), len(image_bytes)))
            out.write(depth_bytes)
            out.write(image_bytes)