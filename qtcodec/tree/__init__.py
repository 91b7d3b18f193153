"""Region quadtree: construction, approximate queries and serialization."""

from .region_tree import (
    Leaf,
    Branch,
    build_tree,
    is_valid_rank,
    iter_samples,
    count_nodes,
    tree_depth,
)
from .query import exact, approx, render, lerp
from .serializer import (
    encode_structure,
    encode_leaf_data,
    channel_size,
    parse_structure,
    fill_regions,
    decode_channel,
)

__all__ = [
    'Leaf',
    'Branch',
    'build_tree',
    'is_valid_rank',
    'iter_samples',
    'count_nodes',
    'tree_depth',
    'exact',
    'approx',
    'render',
    'lerp',
    'encode_structure',
    'encode_leaf_data',
    'channel_size',
    'parse_structure',
    'fill_regions',
    'decode_channel',
]
