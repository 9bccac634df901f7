"""
Cover-crop geometry shared by live framing and export.

An image shown in "cover" mode is scaled until it fills its target on
both axes, so exactly one axis overflows. That axis is the pannable one:
its overflow (the max offset) is the slack a user can pan through. Pan
offsets are measured in display pixels and span ``[-max/2, +max/2]``
around the centered framing, which maps onto a 0 to 100 framing
percentage. Export goes the other way and turns the percentage back into
the source rectangle to sample at any output resolution.

All functions are pure and take measured sizes as explicit inputs.
Degenerate sizes never raise; they produce neutral values.
"""

from __future__ import annotations

from moodboard.constants import (
    ASPECT_TOLERANCE,
    CENTER_PERCENT,
    PERCENT_SPAN,
)
from moodboard.type_defs import (
    CoverCropResult,
    Offset,
    PositionPercent,
    Size,
)

_NO_OFFSET = Offset(0.0, 0.0)
_EMPTY_CROP = CoverCropResult(0.0, 0.0, 0.0, 0.0)


def _snap(slack: float, reference: float) -> float:
    """Zero out float noise left over when aspect ratios are equal."""
    if slack <= ASPECT_TOLERANCE * reference:
        return 0.0
    return slack


def pans_horizontally(natural: Size, target: Size) -> bool:
    """True when the image is relatively wider than the target."""
    return natural.aspect > target.aspect


def compute_max_offset(natural: Size, target: Size) -> Offset:
    """
    Return the overflow of a cover-scaled image past its target.

    A relatively wider image is scaled so its height fills the target and
    overflows horizontally; otherwise it overflows vertically. The other
    axis always has zero slack.
    """
    if natural.is_empty or target.is_empty:
        return _NO_OFFSET

    img_ratio = natural.aspect
    if pans_horizontally(natural, target):
        slack = target.height * img_ratio - target.width
        return Offset(_snap(slack, target.width), 0.0)
    slack = target.width / img_ratio - target.height
    return Offset(0.0, _snap(slack, target.height))


def needs_repositioning(natural: Size, target: Size) -> bool:
    """True when the framing has slack to pan through."""
    max_offset = compute_max_offset(natural, target)
    return max_offset.x > 0 or max_offset.y > 0


def clamp_offset(candidate: Offset, max_offset: Offset) -> Offset:
    """Clamp each axis of a pan offset into ``[-max/2, +max/2]``."""
    half_x = max_offset.x / 2
    half_y = max_offset.y / 2
    return Offset(
        max(-half_x, min(half_x, candidate.x)),
        max(-half_y, min(half_y, candidate.y)),
    )


def _axis_percent(offset: float, max_offset: float) -> float:
    if max_offset == 0:
        return CENTER_PERCENT
    return CENTER_PERCENT + (offset / max_offset) * PERCENT_SPAN


def offset_to_position_percent(
    pan_offset: Offset | None,
    max_offset: Offset,
) -> PositionPercent:
    """
    Map a pixel pan offset to a framing percentage.

    An unset offset is exactly centered. An axis without slack stays at
    50 instead of dividing by zero.
    """
    if pan_offset is None:
        return PositionPercent(CENTER_PERCENT, CENTER_PERCENT)
    return PositionPercent(
        _axis_percent(pan_offset.x, max_offset.x),
        _axis_percent(pan_offset.y, max_offset.y),
    )


def position_percent_to_source_rect(
    natural: Size,
    target: Size,
    position: PositionPercent,
) -> CoverCropResult:
    """
    Return the natural-pixel rectangle that fills target under cover mode.

    The full extent of the non-pannable axis is kept and the pannable
    axis is cropped to the target aspect, with the window placed at the
    given percentage of the remaining slack.
    """
    if natural.is_empty or target.is_empty:
        return _EMPTY_CROP

    target_ratio = target.aspect
    if pans_horizontally(natural, target):
        source_h = natural.height
        source_w = natural.height * target_ratio
        source_x = (position.x / PERCENT_SPAN) * (natural.width - source_w)
        return CoverCropResult(source_x, 0.0, source_w, source_h)

    source_w = natural.width
    source_h = natural.width / target_ratio
    source_y = (position.y / PERCENT_SPAN) * (natural.height - source_h)
    return CoverCropResult(0.0, source_y, source_w, source_h)


def frame(
    natural: Size,
    target: Size,
    pan_offset: Offset | None,
) -> PositionPercent:
    """Return the framing percentage for an image shown in target."""
    return offset_to_position_percent(
        pan_offset, compute_max_offset(natural, target),
    )


def source_rect_for(
    natural: Size,
    target: Size,
    pan_offset: Offset | None,
) -> CoverCropResult:
    """Return the source rectangle matching the live framing of an image."""
    return position_percent_to_source_rect(
        natural, target, frame(natural, target, pan_offset),
    )
