"""Progressive renderer for batched sample accumulation.

This module provides a convenient wrapper around the core integrator that supports:
- Rendering a fixed number of samples per pixel in batches
- Progress callbacks for logging or UI updates
- A generator variant for iterative processing
- Easy reset and re-render functionality

Every primary ray of a ``render(num_samples)`` call is weighted by
``1 / num_samples``, so when the call returns the buffer holds the mean of
the samples. The batch size only controls how often progress is reported.
Each render starts from a cleared buffer; a render stopped early is
rescaled by the samples actually taken, so the image is always a mean.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from mcray.core.progressive import ProgressiveRenderer
    >>> from mcray.scene.presets import create_random_scene
    >>> from mcray.camera.pinhole import setup_camera
    >>>
    >>> scene, camera = create_random_scene(320, 200)
    >>> setup_camera(camera)
    >>>
    >>> renderer = ProgressiveRenderer(320, 200, seed=1)
    >>> renderer.render(100, batch_size=10)  # 100 samples per pixel
    >>> image = renderer.get_image_numpy()
"""

from collections.abc import Callable, Generator

import numpy as np
import numpy.typing as npt

from mcray.core.integrator import (
    MAX_DEPTH,
    get_image_numpy,
    get_total_samples,
    render_samples,
    setup_render_target,
)
from mcray.output.tonemap import tone_map

# Type alias for progress callback
# Callback receives (samples_done, samples_total)
ProgressCallback = Callable[[int, int], None]


class ProgressiveRenderer:
    """A renderer that accumulates a fixed number of samples in batches.

    The renderer maintains its own state for width/height and delegates
    to the global integrator buffers (which are Taichi fields).

    Attributes:
        width: Image width in pixels.
        height: Image height in pixels.
        seed: Seed of the per-pixel random streams.
        max_depth: Bounce budget per path.
        t_min: Smallest accepted hit distance.
    """

    def __init__(
        self,
        width: int,
        height: int,
        *,
        seed: int = 0,
        max_depth: int = MAX_DEPTH,
        t_min: float = 0.0,
    ) -> None:
        """Initialize the progressive renderer.

        Args:
            width: Image width in pixels (max 2048).
            height: Image height in pixels (max 2048).
            seed: Seed of the per-pixel random streams.
            max_depth: Bounce budget per path (>= 0).
            t_min: Smallest accepted hit distance (>= 0).

        Raises:
            ValueError: If dimensions are out of range or max_depth / t_min
                is negative.
        """
        if max_depth < 0:
            raise ValueError(f"Max depth = {max_depth} is negative")
        if t_min < 0.0:
            raise ValueError(f"t_min = {t_min} is negative")
        self._width = width
        self._height = height
        self.seed = seed
        self.max_depth = max_depth
        self.t_min = t_min
        self._planned_samples = 0
        setup_render_target(width, height, seed)

    @property
    def width(self) -> int:
        """Get the image width."""
        return self._width

    @property
    def height(self) -> int:
        """Get the image height."""
        return self._height

    @property
    def sample_count(self) -> int:
        """Get the number of samples per pixel added since the last reset."""
        return get_total_samples()

    def reset(self) -> None:
        """Clear the buffer and restart every pixel stream from the seed."""
        self._planned_samples = 0
        setup_render_target(self._width, self._height, self.seed)

    def render(
        self,
        num_samples: int = 1,
        batch_size: int = 1,
        callback: ProgressCallback | None = None,
    ) -> None:
        """Render ``num_samples`` samples per pixel.

        Samples from an earlier render are discarded first, so rendering
        twice gives the same image as rendering once.

        Args:
            num_samples: Total number of samples per pixel.
            batch_size: Number of samples to render before each callback.
            callback: Optional callback function called after each batch.
                Receives (samples_done, num_samples).

        Raises:
            ValueError: If batch_size is not positive.

        Example:
            >>> def progress(done, total):
            ...     print(f"Progress: {done}/{total} samples")
            >>> renderer.render(100, batch_size=10, callback=progress)
        """
        for done, total in self.render_progressive(num_samples, batch_size):
            if callback is not None:
                callback(done, total)

    def render_progressive(
        self,
        num_samples: int = 1,
        batch_size: int = 1,
    ) -> Generator[tuple[int, int], None, None]:
        """Render samples in batches, yielding progress after each batch.

        This is a generator-based alternative to render() with callbacks.

        Args:
            num_samples: Total number of samples per pixel.
            batch_size: Number of samples to render before each yield.

        Yields:
            Tuple of (samples_done, num_samples).

        Raises:
            ValueError: If batch_size is not positive.
        """
        if batch_size < 1:
            raise ValueError(f"Batch size = {batch_size} must be at least 1")
        if num_samples <= 0:
            return
        if self.sample_count > 0:
            self.reset()

        self._planned_samples = num_samples
        sample_weight = 1.0 / num_samples
        done = 0
        while done < num_samples:
            batch = min(batch_size, num_samples - done)
            render_samples(batch, sample_weight, self.max_depth, self.t_min)
            done += batch
            yield (done, num_samples)

    def get_image_numpy(self) -> npt.NDArray[np.float32]:
        """Get the rendered linear image as a NumPy array.

        If the last render stopped before all its samples were taken, the
        partial sum is rescaled to the mean of the samples taken so far.

        Returns:
            NumPy array of shape (height, width, 3) with dtype float32; row 0
            is the top of the scene.
        """
        image = get_image_numpy()
        done = self.sample_count
        if 0 < done < self._planned_samples:
            image *= np.float32(self._planned_samples / done)
        return image

    def get_image_uint8(self) -> npt.NDArray[np.uint8]:
        """Get the rendered image gamma corrected and quantised to 8 bits.

        Returns:
            NumPy array of shape (height, width, 3) with dtype uint8.
        """
        return tone_map(self.get_image_numpy())

    def __repr__(self) -> str:
        """Return a string representation of the renderer state."""
        return (
            f"ProgressiveRenderer(width={self.width}, height={self.height}, "
            f"samples={self.sample_count})"
        )
