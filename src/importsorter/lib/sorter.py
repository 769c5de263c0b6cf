"""sorter — classify import descriptors into buckets and order them.

Each descriptor is tagged once (static asset, local, relative depth) and
then dropped into the first bucket of the configured group list that
accepts it:

    static: the module has a file extension (``./app.css``)
    global: not local, not static
    local: local with depth 0 (alias / baseUrl imports)
    relative: depth > 0 (``./x`` is depth 1, each leading ``../`` adds 2)
    local: depth > 0 when there is no relative bucket
    rest: everything else

Buckets are emitted in group order.  The relative bucket may be split by
depth and the local bucket by the last capture group of a regex.
"""

from __future__ import annotations

import re
import sys
from dataclasses import dataclass
from typing import Optional, Sequence

from natsort import natsort_keygen

from importsorter.lib import config
from importsorter.lib.classifier import PathClassifier
from importsorter.lib.models import Group, ImportDescriptor, SortOptions

_natural_key = natsort_keygen()


@dataclass(frozen=True)
class ProcessedNode:
    """Descriptor plus the metadata the sorter classifies on."""

    descriptor: ImportDescriptor
    original_order: int
    is_local: bool
    is_static: bool
    relative_depth: int


def relative_depth(module: str) -> int:
    """Return the relative depth of a module specifier.

    ``./x`` is 1, ``../x`` is 2, ``../../x`` is 4; anything else is 0.
    """
    if module.startswith(config.get_str("paths.current_prefix")):
        return config.get_int("paths.current_depth")
    parent = config.get_str("paths.parent_prefix")
    step = config.get_int("paths.parent_step")
    depth = 0
    index = 0
    while module.startswith(parent, index):
        depth += step
        index += len(parent)
    return depth


def sort_group(nodes: Sequence[ProcessedNode], algorithm: str) -> list[ImportDescriptor]:
    """Order one bucket.

    Args:
        nodes: Members of the bucket, in input order.
        algorithm: ``natural``, ``persist`` or anything else (kept as is).

    Returns:
        Descriptors in their new order.
    """
    if algorithm == config.get_str("algorithms.natural"):
        ordered = sorted(nodes, key=lambda n: _natural_key(n.descriptor.module))
    elif algorithm == config.get_str("algorithms.persist"):
        ordered = sorted(nodes, key=lambda n: n.original_order)
    else:
        ordered = list(nodes)
    return [node.descriptor for node in ordered]


class Sorter:
    """Group and order import descriptors.

    Attributes:
        classifier: Decides whether a module is local and what its extension is.
    """

    def __init__(self, classifier: PathClassifier) -> None:
        self.classifier = classifier

    def process(
        self, descriptors: Sequence[ImportDescriptor], options: SortOptions
    ) -> list[list[ImportDescriptor]]:
        """Classify, bucket and sort ``descriptors``.

        Every input descriptor appears in exactly one output group; empty
        groups are never emitted.

        Args:
            descriptors: Descriptors in source order.
            options: Effective sort options.

        Returns:
            Ordered list of non-empty groups.
        """
        groups = self.effective_groups(options.groups)
        buckets: dict[str, list[ProcessedNode]] = {bucket: [] for bucket, _ in groups}
        for node in self.resolve_metadata(descriptors):
            buckets[self.classify(node, buckets)].append(node)

        names = config.get_dict("buckets")
        split_pattern = self._compile_split_pattern(options.split_local_pattern)
        result: list[list[ImportDescriptor]] = []
        for bucket, algorithm in groups:
            members = buckets[bucket]
            if not members:
                continue
            if bucket == names["relative"] and options.split_relative_groups:
                result.extend(self.split_relative(members, algorithm, options.relative_sort_alg))
            elif bucket == names["local"] and split_pattern is not None:
                result.extend(self.split_local(members, algorithm, split_pattern))
            else:
                result.append(sort_group(members, algorithm))
        return result

    # -----------------------------------------------------------------------
    # Steps
    # -----------------------------------------------------------------------

    def resolve_metadata(self, descriptors: Sequence[ImportDescriptor]) -> list[ProcessedNode]:
        return [
            ProcessedNode(
                descriptor=descriptor,
                original_order=index,
                is_local=self.classifier.is_local(descriptor.module),
                is_static=bool(self.classifier.get_extension(descriptor.module)),
                relative_depth=relative_depth(descriptor.module),
            )
            for index, descriptor in enumerate(descriptors)
        ]

    @staticmethod
    def effective_groups(groups: Sequence[Group]) -> list[Group]:
        """Drop repeated buckets and make sure ``rest`` is present."""
        rest = config.get_str("buckets.rest")
        seen: set[str] = set()
        result: list[Group] = []
        for bucket, algorithm in groups:
            if bucket in seen:
                continue
            seen.add(bucket)
            result.append((bucket, algorithm))
        if rest not in seen:
            result.append((rest, config.get_str("algorithms.persist")))
        return result

    @staticmethod
    def classify(node: ProcessedNode, buckets: dict[str, list[ProcessedNode]]) -> str:
        """Return the bucket name ``node`` belongs to."""
        names = config.get_dict("buckets")
        if node.is_static and names["static"] in buckets:
            return names["static"]
        if not node.is_local and not node.is_static and names["global"] in buckets:
            return names["global"]
        if node.relative_depth == 0 and names["local"] in buckets:
            return names["local"]
        if node.relative_depth > 0 and names["relative"] in buckets:
            return names["relative"]
        if node.relative_depth > 0 and names["local"] in buckets:
            return names["local"]
        return names["rest"]

    @staticmethod
    def split_relative(
        members: Sequence[ProcessedNode], algorithm: str, order: str
    ) -> list[list[ImportDescriptor]]:
        """Split the relative bucket into one group per depth."""
        shallow_first = order == config.get_str("relative_sort.shallow_first")
        depths = sorted({node.relative_depth for node in members}, reverse=not shallow_first)
        return [
            sort_group([node for node in members if node.relative_depth == depth], algorithm)
            for depth in depths
        ]

    @staticmethod
    def split_local(
        members: Sequence[ProcessedNode], algorithm: str, pattern: re.Pattern[str]
    ) -> list[list[ImportDescriptor]]:
        """Split the local bucket by the last capture group of ``pattern``.

        Modules the pattern does not match (or whose last group did not
        participate) share one reserved partition.  Partitions keep the
        order in which their first member was seen.
        """
        unmatched = config.get_str("defaults.unmatched_bucket")
        partitions: dict[str, list[ProcessedNode]] = {}
        for node in members:
            match = pattern.search(node.descriptor.module)
            key = match.group(pattern.groups) if match else None
            partitions.setdefault(key if key is not None else unmatched, []).append(node)
        return [sort_group(nodes, algorithm) for nodes in partitions.values()]

    @staticmethod
    def _compile_split_pattern(pattern: str) -> Optional[re.Pattern[str]]:
        if not pattern:
            return None
        try:
            return re.compile(pattern)
        except re.error as exc:
            msg = config.get_str("messages.bad_split_pattern")
            sys.stderr.write(msg.format(pattern=pattern, error=exc) + "\n")
            return None
