# deskkit

Pieces of a tiling X11 desktop, each usable on its own. Apart from the two
commands, everything here is plain computation: it parses, measures and
computes geometry, and leaves the drawing to the caller.

| Module | What it gives you |
| --- | --- |
| `deskkit.sixel` | `SixelParser`, a sixel decoder producing ARGB `ImageTile`s; `create_clipmask`; `sixel_xrgb` |
| `deskkit.hls` | `hls_to_rgb`, the sixel HLS colour conversion |
| `deskkit.boxdraw` | `is_boxdraw`, `boxdraw_index`, `draw_box`, `box_lines` for U+2500–U+259F and braille, as `Rect`s |
| `deskkit.dnd` | `url_decode`, `paste_data`: dropped URI lists turned into pasteable text |
| `deskkit.blocks` | a status-bar runner (`deskkit-blocks`) |
| `deskkit.ipc` | `IpcClient` for the window manager's IPC socket (`deskkit-msg`) |
| `deskkit.status2d` | parsing and measuring status text with `^…^` colour and drawing codes |
| `deskkit.tags` | `shift_tags`, `adjust_cfact`, `cycle_layout_index`, `tag_icon` |
| `deskkit.layouts` | `tile`, `fibonacci`, `monocle`, plus gap and client-factor helpers |
| `deskkit.autostart` | `autostart_dir`, `run_autostart` |

The package has no runtime dependencies.

## Installing

```
pip install .
```

## Status bar: `deskkit-blocks`

```
deskkit-blocks        # set the status as the X root window's WM_NAME
deskkit-blocks -d     # print each changed status line to stdout instead
deskkit-blocks -h     # print usage and exit with status 1
```

Each block runs a shell command in a child process and shows the first line
of its output, cut to `max_block_output_length` characters. Outputs that are
not empty are joined with the configured delimiter (`" | "` by default). When
`clickable_blocks` is on, each block with a signal is preceded by a control
character whose code is that signal.

Blocks run on a timer that ticks every greatest common divisor of the
intervals. At start-up every block runs. A block with interval 0 runs only
on signals. Signals:

- `SIGUSR1` runs every block again;
- `SIGRTMIN+n` runs the block whose signal is `n`;
- `SIGINT` or `SIGTERM` stops the runner.

A command that exits with a non-zero status is reported on stderr, and the
block keeps its previous output.

The X connection speaks the X protocol directly over the display's socket.
It uses `$DISPLAY`, and a `MIT-MAGIC-COOKIE-1` from `$XAUTHORITY` (or
`~/.Xauthority`) when one matches.

The pieces can be used from Python too:

```python
from deskkit.blocks.config import BlockSpec, StatusConfig
from deskkit.blocks.main import build_blocks
from deskkit.blocks.timer import Timer

config = StatusConfig(blocks=(BlockSpec("", "date +%H:%M", 60, 1),))
blocks = build_blocks(config)
timer = Timer(b.interval for b in blocks)
timer.must_run(60)   # True: the timer starts at its reset value
```

`Block` objects need `open()` before `execute()` and `update()`. They can also
be used as context managers.

### What it does not do

The command always uses the fixed block list from
`deskkit.blocks.config.default_config()`, which runs scripts under
`~/.local/bin`. No configuration file is read. To use other blocks, build a
`StatusConfig` and call `event_loop` from Python. A mouse button is never
passed to a block through a signal: blocks started by `SIGRTMIN+n` get no
`BLOCK_BUTTON`.

## IPC client: `deskkit-msg`

```
deskkit-msg get_monitors
deskkit-msg get_tags
deskkit-msg get_layouts
deskkit-msg get_dwm_client 12345
deskkit-msg run_command view 2
deskkit-msg --ignore-reply subscribe tag_change_event
deskkit-msg help
```

The command connects to `/tmp/dwm.sock` and prints each reply. `run_command`
sends its arguments as integers, floats or strings, according to how each one
looks. `subscribe` keeps printing events until the connection ends.
`--ignore-reply` hides the replies to `run_command` and `subscribe`. A usage
error exits with status 1, and a lost connection exits with status 2.

From Python:

```python
from deskkit.ipc import IpcClient

with IpcClient.connect("/tmp/dwm.sock") as client:
    print(client.get_tags())
```

`encode_message` and `decode_header` expose the message framing: the magic
`DWM-IPC`, a 32-bit payload size and a type byte.

## Decoding sixel data

```python
from deskkit.sixel import SixelParser, create_clipmask

parser = SixelParser(False, 0xFFFFFFFF, 0xFF000000, True, 10, 20)
parser.parse(b'"1;1;4;6#1;2;100;0;0#1~~~~')
tiles = parser.finalize(0, 0, 10, 20)   # one ImageTile, 4 x 6 pixels
mask = create_clipmask(tiles[0].pixels, tiles[0].width, tiles[0].height, True)
```

`parse` returns the number of bytes consumed. It stops before an ESC byte.
`finalize` raises `ValueError` when the cell size is not positive or the
image is empty.

## Box drawing

```python
from deskkit.boxdraw import boxdraw_index, draw_box

bd = boxdraw_index(0x2580, bold=False, boxdraw_bold=False, braille=False)
draw_box(0, 0, 8, 16, bd, "fg", "bg")   # [Rect(x=0, y=0, w=8, h=8, color='fg')]
```

Shades (U+2591–U+2593) blend `fg` and `bg`, which must then be RGB tuples.

## Status text, tags and layouts

```python
from deskkit.status2d import status2d_text_length, parse_status2d
from deskkit.layouts import Gaps, TiledClient, WorkArea, tile

status2d_text_length("a^c#ff0000^bc", len)   # 3
parse_status2d("a^c#ff0000^bc")              # text, fg, text DrawOps

tile(WorkArea(0, 0, 1000, 600), [TiledClient(), TiledClient()], 1, 0.5, Gaps())
# [Geometry(x=0, y=0, w=500, h=600), Geometry(x=500, y=0, w=500, h=600)]
```

`run_autostart()` looks for scripts in `$XDG_DATA_HOME/dwm`, or failing that
`~/.local/share/dwm`. If that is not a directory, it uses `~/.dwm`. It runs
`autostart_blocking.sh` and waits for it, then starts `autostart.sh` in the
background.

## Running the tests

```
pip install .[test]
pytest
```