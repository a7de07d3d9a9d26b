# tdsscope

Building blocks for viewing waveforms from a TDS 520A oscilloscope:
waveform measurements, scope-style plot layout, GPIB protocol helpers, and
the HTTP and WebSocket pieces needed to push data to a browser.

## Modules

- `tdsscope.measurements` – `ScopeChannel`, `Sample` and `DecodedWaveform`;
  `estimate_frequency` (from positive-going zero crossings), `rms`;
  `format_timediv`, `format_voltdiv` and `format_frequency` for display text;
  `next_rate_up`, `next_rate_down` and `parse_rate` for stepping an
  acquisition rate through 1, 2, 5, 10, 20, 50, 100, 200 and unlimited (0).
- `tdsscope.view` – `ViewTransform`, which maps seconds and volts to pixels
  and back, fits itself to the scope graticule (`set_from_scope`) or to a data
  range (`fit_to_waveform`), and supports `zoom` and `pan`; `RenderContext`
  holds the view together with colours, division counts and cursor state.
- `tdsscope.layout` – `PlotArea` and `plot_area` for the inset plot region,
  `grid_x_positions` / `grid_y_positions`, `voltage_labels` / `time_labels`
  (and the single-value `format_voltage_label` / `format_time_label`),
  `trigger_line_y` and `waveform_points` for the trace polyline.
- `tdsscope.gpib` – `GpibError` (an exception carrying `ibsta`, `iberr`,
  `ibcntl`), `GpibDeviceInfo`, `FoundDevice`, the `Timeout` codes,
  `error_code_to_string`, `parse_binary_block` for IEEE 488.2 definite-length
  blocks, `is_tektronix_idn` and `scan_addresses`.
- `tdsscope.http` – `HttpRequestParser`, an incremental HTTP/1.1 request
  parser (raises `HttpParseError` on a malformed head or a `..` path),
  `HttpRequest`, `HttpResponse` and `parse_method`.
- `tdsscope.websocket` – `accept_key`, `encode_frame`, the incremental
  `FrameParser`, and `WebSocketConnection`, which performs the 101 upgrade on a
  socket and then sends and receives text and binary frames.
- `tdsscope.encoding` – `b64encode`, a lenient `b64decode`, and `sha1_digest`.

## Installation

```
pip install .
```

## Examples

```python
from tdsscope.measurements import DecodedWaveform, Sample, format_timediv, rms

print(format_timediv(0.0005))   # 500.00 µs/div

wave = DecodedWaveform(samples=[Sample(0.0, 1.0), Sample(1.0, -1.0)])
print(rms(wave))                # 1.0
```

```python
from tdsscope.websocket import accept_key, encode_frame

print(accept_key("dGhlIHNhbXBsZSBub25jZQ=="))  # s3pPLMBiTxaQ9kYGzzhZRbK+xOo=
frame = encode_frame(1, "hello")               # FIN + text frame, unmasked
```

```python
from tdsscope.gpib import parse_binary_block

print(parse_binary_block(b"#15hello"))  # b'hello'
```

## What this package does not do

- It has no command-line program and no running web server: there is nothing
  that listens on a port, serves a viewer page or broadcasts waveforms. The
  HTTP parser, response builder and WebSocket connection are the parts such a
  server would be built from.
- It does not generate the browser viewer page or the status and waveform JSON
  messages.
- It does not talk to a GPIB board or instrument. `tdsscope.gpib` decodes
  driver status and instrument responses, but opening devices, writing
  commands and reading data are left to the caller's own driver access.
- It does not draw anything on screen; `tdsscope.layout` and `tdsscope.view`
  compute the coordinates and labels a drawing layer would use.

## Tests

```
pip install .[test]
pytest
```