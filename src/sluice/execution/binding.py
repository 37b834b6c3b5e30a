"""What the binding collaborator tells the runtime about one transform.

A TransformBinding is fixed when the transform is wired into a pipeline:
which side output tags it declared, which side inputs it reads, whether its
input is keyed, and the window function of its input collection.
"""

from collections.abc import Callable, Iterable
from dataclasses import dataclass, field
from typing import Any

from sluice.contracts import (
    MAIN_OUTPUT,
    OutputTag,
    Record,
    SideInputView,
    TooManyOutputsError,
)
from sluice.core.config import DEFAULT_MAX_SIDE_OUTPUT_TAGS
from sluice.windowing import GlobalWindows, WindowFn


def key_of_pair(value: Any) -> Any:
    """Key extractor for (key, value) pair elements."""
    return value[0]


@dataclass(frozen=True)
class TransformBinding:
    """Declared outputs, side inputs and keying for one transform.

    Raises:
        TooManyOutputsError: If more side output tags are declared than
            max_side_output_tags allows.
        ValueError: If a side output reuses the main output tag.
    """

    main_tag: OutputTag[Any] = MAIN_OUTPUT
    side_output_tags: frozenset[OutputTag[Any]] = frozenset()
    side_inputs: frozenset[SideInputView[Any]] = frozenset()
    key_fn: Callable[[Any], Any] | None = field(default=None, compare=False)
    window_fn: WindowFn = field(default_factory=GlobalWindows, compare=False)
    max_side_output_tags: int = DEFAULT_MAX_SIDE_OUTPUT_TAGS

    def __post_init__(self) -> None:
        object.__setattr__(self, "side_output_tags", frozenset(self.side_output_tags))
        object.__setattr__(self, "side_inputs", frozenset(self.side_inputs))
        if self.main_tag in self.side_output_tags:
            raise ValueError(f"Side output tags cannot include the main tag {self.main_tag!r}")
        if len(self.side_output_tags) > self.max_side_output_tags:
            raise TooManyOutputsError(len(self.side_output_tags), self.max_side_output_tags)

    @classmethod
    def create(
        cls,
        *,
        side_outputs: Iterable[OutputTag[Any]] = (),
        side_inputs: Iterable[SideInputView[Any]] = (),
        key_fn: Callable[[Any], Any] | None = None,
        window_fn: WindowFn | None = None,
        main_tag: OutputTag[Any] = MAIN_OUTPUT,
        max_side_output_tags: int = DEFAULT_MAX_SIDE_OUTPUT_TAGS,
    ) -> "TransformBinding":
        """Build a binding from any iterables."""
        return cls(
            main_tag=main_tag,
            side_output_tags=frozenset(side_outputs),
            side_inputs=frozenset(side_inputs),
            key_fn=key_fn,
            window_fn=window_fn if window_fn is not None else GlobalWindows(),
            max_side_output_tags=max_side_output_tags,
        )

    @property
    def is_keyed(self) -> bool:
        return self.key_fn is not None

    @property
    def output_tags(self) -> frozenset[OutputTag[Any]]:
        """Main tag plus all side output tags."""
        return self.side_output_tags | {self.main_tag}

    def declares_side_input(self, view: SideInputView[Any]) -> bool:
        return view in self.side_inputs

    def key_of(self, record: Record[Any]) -> Any:
        """Key of the record's element. Only valid for keyed transforms."""
        if self.key_fn is None:
            raise ValueError("Transform is not keyed")
        return self.key_fn(record.value)
