"""TensorFlow implementation of the escape-time sweep."""

from __future__ import annotations

from typing import Optional

import numpy as np
import tensorflow as tf

from .renderer import BOUNDED, EscapeParameters, GridSize, Viewport, grid_axes


@tf.function
def _escape_step(
    i: tf.Tensor,
    zr: tf.Tensor,
    zi: tf.Tensor,
    cr: tf.Tensor,
    ci: tf.Tensor,
    counts: tf.Tensor,
    active: tf.Tensor,
    threshold: tf.Tensor,
) -> tuple[tf.Tensor, tf.Tensor, tf.Tensor, tf.Tensor]:
    """Test every active point against the threshold, then advance it once."""

    escaped = tf.logical_and(active, zr * zr + zi * zi > threshold)
    counts = tf.where(escaped, tf.fill(tf.shape(counts), i), counts)
    active = tf.logical_and(active, tf.logical_not(escaped))
    zr_new = zr * zr - zi * zi + cr
    zi_new = zr * zi + zi * zr + ci
    zr = tf.where(active, zr_new, zr)
    zi = tf.where(active, zi_new, zi)
    return zr, zi, counts, active


@tf.function
def _escape_run(
    cr: tf.Tensor,
    ci: tf.Tensor,
    max_iterations: tf.Tensor,
    threshold: tf.Tensor,
) -> tf.Tensor:
    """Iterate until every point escaped or ``max_iterations + 1`` tests ran."""

    last = tf.cast(max_iterations, tf.int64) + 1
    i = tf.constant(0, dtype=tf.int64)
    zr = tf.zeros_like(cr)
    zi = tf.zeros_like(ci)
    counts = tf.fill(tf.shape(cr), tf.constant(BOUNDED, dtype=tf.int64))
    active = tf.ones_like(cr, tf.bool)

    def cond(i, zr, zi, counts, active):
        return tf.logical_and(tf.less_equal(i, last), tf.reduce_any(active))

    def body(i, zr, zi, counts, active):
        zr, zi, counts, active = _escape_step(i, zr, zi, cr, ci, counts, active, threshold)
        return i + 1, zr, zi, counts, active

    _, _, _, counts, _ = tf.while_loop(cond, body, (i, zr, zi, counts, active))
    return counts


def tensor_escape_counts(
    grid: GridSize,
    viewport: Viewport,
    params: EscapeParameters,
    *,
    device: Optional[str] = None,
) -> np.ndarray:
    """Escape counts for every grid cell, computed with TensorFlow."""

    xs, ys = grid_axes(grid, viewport)
    with tf.device(device if device is not None else "/CPU:0"):
        x_tf = tf.convert_to_tensor(xs, dtype=tf.float64)
        y_tf = tf.convert_to_tensor(ys, dtype=tf.float64)
        cr, ci = tf.meshgrid(x_tf, y_tf)
        counts = _escape_run(
            cr,
            ci,
            tf.constant(params.max_iterations, dtype=tf.int64),
            tf.constant(params.escape_threshold_sq, dtype=tf.float64),
        )
    return counts.numpy().astype(np.int64, copy=False)
