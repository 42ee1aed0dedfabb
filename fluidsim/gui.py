"""Real-time density display using Taichi UI.

Shows the interior of density.current as a grayscale image, one pixel per
cell, and feeds the left mouse button into an InputState.
"""

import taichi as ti

from fluidsim.core.dtypes import DTYPE


@ti.data_oriented
class DensityView:
    """Window showing the density field.

    Handles the copy from the padded simulation grid into an N x N image
    and translates cursor input into grid coordinates.
    """

    def __init__(self, n: int, window_title: str = "fluidsim", headless: bool = False):
        """Initialize view.

        Args:
            n: Interior grid resolution (image is n x n).
            window_title: Title of the window.
            headless: If True, do not create window (for testing).
        """
        self.n = n
        self.headless = headless
        self.image = ti.field(dtype=DTYPE, shape=(n, n))

        if not self.headless:
            self.window = ti.ui.Window(window_title, (n, n), vsync=True)
            self.canvas = self.window.get_canvas()
        else:
            self.window = None
            self.canvas = None

    @ti.kernel
    def copy_interior(self, density: ti.template()):
        """Copy the interior of a padded density field, clamped to [0, 1]."""
        for i, j in self.image:
            self.image[i, j] = ti.math.clamp(density[i + 1, j + 1], 0.0, 1.0)

    def update(self, density_field):
        """Refresh the image from a BufferedField's current buffer."""
        self.copy_interior(density_field.current)

    @property
    def is_running(self) -> bool:
        if self.headless:
            return False
        return self.window.running

    def poll_input(self, input_state) -> None:
        """Update an InputState from the cursor and left mouse button.

        Cursor coordinates in [0, 1]^2 map to grid coordinates [0, N]^2.
        """
        if self.headless:
            return

        cx, cy = self.window.get_cursor_pos()
        x, y = cx * self.n, cy * self.n

        if self.window.is_pressed(ti.ui.LMB):
            if input_state.is_down:
                input_state.move(x, y)
            else:
                input_state.press(x, y)
        elif input_state.is_down:
            input_state.release()

    def render(self):
        """Render the current frame."""
        if self.headless:
            return

        if self.window.is_pressed(ti.ui.ESCAPE):
            self.window.running = False
            return

        self.canvas.set_image(self.image)
        self.window.show()
