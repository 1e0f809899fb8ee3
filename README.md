# vbiencode

Builds the data bytes carried in the vertical blanking interval of
analogue television signals. Each encoder produces the packed bits for
the lines it owns.

## Encoders

### `vbiencode.wss` — Widescreen Signalling

For line 23 (`WSS_LINE`) of 625-line systems.

- `WssEncoder(mode, active_width, active_lines)` takes a mode name
  (matched without regard to case): `"4:3"`, `"14:9-letterbox"`,
  `"14:9-top"`, `"16:9-letterbox"`, `"16:9-top"`, `"16:9+-letterbox"`,
  `"14:9-window"`, `"16:9"` or `"auto"`.
- `frame_aspects()` gives the display aspect ratios (as `Fraction`s) the
  frame should be prepared for.
- `vbi_for(pixel_aspect_ratio=None)` returns the 18 packed bytes
  (137 bits, MSB first). In `"auto"` mode the pixel aspect ratio of the
  source frame is required and selects 4:3 or 16:9; in other modes it is
  ignored.
- `find_mode(name)` looks up a `WssMode`; `group_bits(vbi, code, offset,
  length)` writes a bi-phase coded bit group into a `bytearray`.

### `vbiencode.vitc` — Vertical Interval Timecode

- `VitcEncoder(raster, frame_rate)` takes a `Raster` (`R625` or `R525`,
  or the line count) and a frame rate with `numerator`/`denominator`,
  such as a `Fraction`. Whole rates up to 30 fps are accepted, and
  30000/1001 selects drop-frame counting.
- `lines()` gives the four lines per frame that carry VITC.
- `timecode(frame, second_field)` builds the 32-bit BCD timecode word.
- `encode(frame, line)` returns the 12 packed bytes (90 bits, LSB first,
  with sync bits and CRC) or `None` if the line carries no VITC.
- `pack_bits(data, offset, bits, nbits)` is the LSB-first bit writer.

### `vbiencode.videocrypts` — Videocrypt S

- `VcsEncoder(mode)` takes `"free"` or `"conditional"`.
- `next_frame()` builds the next frame's 40-byte VBI packet and advances
  the frame counter; every 32 frames the encoder moves to the next
  `VcsBlock` (the current one is `block`).
- `line_data(line)` returns the five bytes for a VBI line of the current
  frame, or `None` for lines that carry none.
- The helpers `encode_vbi`, `interleave`, `reverse_bits` and
  `swap_nibbles` are public as well.

## Example

```python
from fractions import Fraction

from vbiencode.vitc import Raster, VitcEncoder
from vbiencode.wss import WssEncoder

vitc = VitcEncoder(Raster.R625, Fraction(25, 1))
first = vitc.lines()[0]
line_bytes = vitc.encode(frame=1500, line=first)

wss = WssEncoder("auto", active_width=702, active_lines=576)
bits = wss.vbi_for(Fraction(1, 1))
```

Unknown modes, unsupported rasters or unsupported frame rates raise
`ValueError`.

## What it does not do

- It does not turn bits into waveform samples or draw them onto video
  lines; the caller renders the returned bytes.
- The Videocrypt S encoder produces only the VBI messages; it does not
  shuffle picture lines.

## Tests

```
pip install -e ".[test]"
pytest
```