"""Meshes, renderable instances and packed GPU-style buffers."""

from __future__ import annotations

import struct
from abc import ABC, abstractmethod
from collections.abc import Iterable, Sequence
from dataclasses import dataclass

Point = tuple[float, float, float]
TransformMatrix = tuple[float, ...]
Color = tuple[float, float, float]

IDENTITY: TransformMatrix = (
    1.0, 0.0, 0.0, 0.0,
    0.0, 1.0, 0.0, 0.0,
    0.0, 0.0, 1.0, 0.0,
)

ATTRIBUTES_SIZE = 64
_ATTRIBUTES = struct.Struct("=12f3f4x")
_INDEX = struct.Struct("=I")
_VERTEX = struct.Struct("=6f")
INSTANCE_STRIDE = 16 * 4


@dataclass(frozen=True)
class ThickMeshVertex:
    """A vertex of a thickened segment, knowing the segment's other end."""

    this_position: Point
    other_position: Point


@dataclass(frozen=True)
class ThickMesh:
    """Triangles built from line segments: four vertices and six indices each."""

    indices: tuple[int, ...]
    vertices: tuple[ThickMeshVertex, ...]


@dataclass(frozen=True)
class BaseMesh:
    """A mesh of line segments given as pairs of vertex indices."""

    vertices: Sequence[Point]
    indices: Sequence[int]

    def thicken(self) -> ThickMesh:
        """Turn every segment into a quad of two triangles."""
        if len(self.indices) % 2:
            raise ValueError("segment indices must come in pairs")
        new_indices: list[int] = []
        new_vertices: list[ThickMeshVertex] = []
        pairs = iter(self.indices)
        for start, end in zip(pairs, pairs):
            template = ThickMeshVertex(
                tuple(self.vertices[start]), tuple(self.vertices[end])
            )
            first = len(new_vertices)
            new_vertices.extend([template] * 4)
            new_indices.extend(
                (first, first + 1, first + 2, first + 2, first + 3, first)
            )
        return ThickMesh(tuple(new_indices), tuple(new_vertices))


class Instance(ABC):
    """Something that can be drawn with one of the registered models."""

    def transform(self) -> TransformMatrix:
        """Row-major 3x4 transform from model space to world space."""
        return IDENTITY

    @abstractmethod
    def color(self) -> Color:
        """RGB colour, each channel 0 to 1."""

    @abstractmethod
    def model(self) -> int:
        """Index of the model this instance is drawn with."""

    def attributes(self) -> bytes:
        """Pack transform and colour into the 64-byte per-instance record."""
        transform = tuple(self.transform())
        color = tuple(self.color())
        if len(transform) != 12 or len(color) != 3:
            raise ValueError("transform needs 12 values and colour 3")
        return _ATTRIBUTES.pack(*transform, *color)


@dataclass(frozen=True)
class Model:
    """Where a model's indices and vertices live in the shared buffers."""

    index_range: range
    vertex_range: range


def _index_bytes(mesh: ThickMesh, vertex_start: int) -> bytes:
    return b"".join(_INDEX.pack(idx + vertex_start) for idx in mesh.indices)


def _vertex_bytes(mesh: ThickMesh) -> bytes:
    return b"".join(
        _VERTEX.pack(*v.this_position, *v.other_position) for v in mesh.vertices
    )


class Manager:
    """Holds every model's geometry and the per-frame instance data."""

    def __init__(self, meshes: Iterable[ThickMesh], max_instances: int) -> None:
        meshes = list(meshes)
        index_total = sum(len(m.indices) for m in meshes)
        vertex_total = sum(len(m.vertices) for m in meshes)

        self.index_buffer = bytearray(index_total * _INDEX.size)
        self.vertex_buffer = bytearray(vertex_total * _VERTEX.size)
        self.instance_buffer = bytearray(max_instances * INSTANCE_STRIDE)
        self.models: list[Model] = []

        print(f"Total Index Ct: {index_total}")
        print(f"Total Vertex Ct: {vertex_total}")
        print(f"Total Instance Max: {max_instances}")

        index_start = 0
        vertex_start = 0
        for mesh in meshes:
            print(f"Index Start: {index_start}")
            print(f"Vertex Start: {vertex_start}")

            index_bytes = _index_bytes(mesh, vertex_start)
            vertex_bytes = _vertex_bytes(mesh)
            index_offset = index_start * _INDEX.size
            vertex_offset = vertex_start * _VERTEX.size
            self.index_buffer[index_offset:index_offset + len(index_bytes)] = index_bytes
            self.vertex_buffer[
                vertex_offset:vertex_offset + len(vertex_bytes)
            ] = vertex_bytes

            print(f"Allocated {len(index_bytes)} Index Bytes")
            print(f"Allocated {len(vertex_bytes)} Vertex Bytes")

            model = Model(
                range(index_start, index_start + len(mesh.indices)),
                range(vertex_start, vertex_start + len(mesh.vertices)),
            )
            self.models.append(model)
            index_start = model.index_range.stop
            vertex_start = model.vertex_range.stop

    def update(self, instances: Iterable[Instance]) -> list[tuple[range, range]]:
        """Write the instances grouped by model; return draw ranges per model."""
        per_model: list[list[bytes]] = [[] for _ in self.models]
        for inst in instances:
            model = inst.model()
            if not 0 <= model < len(per_model):
                raise IndexError(f"unknown model {model}")
            per_model[model].append(inst.attributes())

        data = b"".join(b"".join(group) for group in per_model)
        if len(data) > len(self.instance_buffer):
            raise ValueError("too many instances for the instance buffer")
        self.instance_buffer[:len(data)] = data

        return self.ranges(len(group) for group in per_model)

    def ranges(self, instance_counts: Iterable[int]) -> list[tuple[range, range]]:
        """Pair each model's index range with its consecutive instance range."""
        result = []
        start = 0
        for model, count in zip(self.models, instance_counts):
            end = start + count
            result.append((model.index_range, range(start, end)))
            start = end
        return result


class ManagerBuilder:
    """Collects meshes before the manager's buffers are laid out."""

    def __init__(self) -> None:
        self.meshes: list[ThickMesh] = []

    def register_model(self, mesh: ThickMesh) -> int:
        """Add a mesh and return its model index."""
        self.meshes.append(mesh)
        return len(self.meshes) - 1

    def build(self, max_instances: int) -> Manager:
        """Lay out every registered mesh into a manager."""
        return Manager(self.meshes, max_instances)