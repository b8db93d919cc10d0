# mandelzoom

Render the Mandelbrot set, and the Julia sets that go with it, at any depth.
Coordinates are kept as arbitrary-precision numbers (via `mpmath`), and the
working precision grows with the zoom level in steps of 32 bits, so views far
narrower than a double can resolve still come out sharp. Images are written
with Pillow.

Pixels are not computed in one pass. Work starts from the edges of the
picture and spreads inward from pixels that have escaped, so the escape
boundary fills in first.

## Installation

```
pip install .
```

To run the tests:

```
pip install .[test]
pytest
```

## Commands

### `mandelzoom-explorer`

Renders one view of the set and saves it as an image (`m.bmp` by default;
the format follows the file suffix).

The starting view is read from `MandelbrotSet.ini` (or the file given with
`--view`). That file has three lines: the real part of the centre, the
imaginary part of the centre and the width of the view. If the file does not
exist, the whole set is shown, from −2.2 to 2.2 on the real axis and −1.65 to
1.65 on the imaginary axis.

Options:

- `--select X0 Y0 X1 Y1` – zoom into a pixel rectangle; the rectangle is
  widened to exactly 4:3. May be repeated; each selection applies to the
  view left by the one before.
- `--zoom-out N` – double the width and height of the view N times.
- `--julia X Y` – render the Julia set of the point under that pixel,
  over the wide default frame.
- `--size WIDTH HEIGHT` – picture size (160×120 by default).
- `--passes N` – most refinement passes to run (1024 by default).
- `--output FILE` – image to write.
- `--save-view FILE` – store the final view in the three-line form above,
  with 500 decimals per value.
- `--seed N` – seed for the few randomly chosen starting pixels.

After saving, it prints the centre, the width (420 decimals each), the
precision in bits and the deepest escape count seen.

### `mandelzoom-zoom`

Renders a sequence of frames zooming in on a fixed point. Each frame's
half-width is the previous one's times a constant factor, and frames stop
once the half-width is no longer above a minimum. Every frame is saved as
`snapNNNNNN.bmp` (six-digit frame number) in `--directory` (the current
directory by default). A frame is rendered only if its file can be newly
created, so a file that already exists is skipped; several runs can share a
directory and an interrupted run carries on where it stopped.

Without `--ini`, the zoom uses 640×480 frames, a built-in centre, a starting
half-width of 8 and a factor of about 0.9786, down to 2·10⁻¹⁴.

With `--ini FILE`, the file holds, one per line: the real part of the centre,
the imaginary part of the centre, the smallest half-width, one ignored line,
and the number of the first frame to render (earlier frames are skipped).
Such runs use 1280×960 frames, a starting half-width of 2 and a factor of
0.5, and end each frame once the iteration budget has outgrown twice the
shallowest escape seen.

`--size WIDTH HEIGHT` overrides the frame size. The written paths are
printed.

### `mandelzoom-logo`

```
mandelzoom-logo [SOURCE] [TARGET]
```

Turns a binary file (`logo.jpg` by default) into C source (`logo.cpp` by
default) holding its bytes as an `unsigned char logo_res[]` array, with
functions `getlogodatasize()` and `getlogodata()`.

## Library use

- `mandelzoom.palette` – `hsl_to_rgb`, `square_channels`, `gradient` and
  `explorer_palette`.
- `mandelzoom.precision` – `precision_for` (bits for a given view width),
  `parse_real`, and the escape-time iteration `iterate` and test `escaped`.
- `mandelzoom.worklist` – `UpdateList`, the double-buffered queue of pixels
  still to be refined (`push`, `drain`, `swap`, `clear`, `len()`).
- `mandelzoom.explorer` – `View` (`center`, `span`, `zoomed_out`,
  `point_at`, `select`), `default_view`, `fit_selection`, `load_view`,
  `save_view`, and `Explorer` (`restart`, `refine`, `pending`, `image`,
  `save_image`).
- `mandelzoom.animation` – `FrameRenderer` (`render`, `fill_gaps`,
  `iterations`, `image`) and `animation_palette`.
- `mandelzoom.sequence` – `FrameView`, `frame_views`, `snapshot_name` and
  `claim_snapshot`.
- `mandelzoom.zoom` – `ZoomSettings`, `load_settings` and `run`.
- `mandelzoom.logo` – `render_c_array` and `convert`.

Pixels inside the set never escape and stay queued, so refinement should be
bounded by a number of passes:

```python
from mandelzoom.explorer import Explorer, default_view

explorer = Explorer(default_view(False), 160, 120, None, None)
for _ in range(200):
    if not explorer.pending():
        break
    explorer.refine()
explorer.save_image("mandelbrot.png")
```

## What it does not do

There is no window and no live interaction: the explorer does not show the
picture while it is drawn, and zooming, zooming out and switching to a Julia
set are given as command-line options rather than with the mouse or keys.
The zoom command does not stamp any logo or text onto its frames.