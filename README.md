# accutil

This package provides building blocks for command-line tools that configure
data accelerator devices through sysfs. It has no runtime dependencies.

## Installation

    pip install .

To run the tests, install the test extra as well:

    pip install ".[test]"
    pytest

## Modules

- `accutil.option`: option descriptions and help text. An `Option` has an
  `OptionType`, a short and/or long name and a `value`, and it can carry
  `OptionFlag` flags. `format_option_help`, `usage_text` and
  `options_usage_text` build the help output. `verbosity_callback` raises or
  lowers a verbosity level.
- `accutil.parser`: a git-style option parser. `ParseContext` works through
  an argument list one `step()` at a time and returns a `ParseStep`. Its
  `end()` method returns the arguments that are left over.
  `parse_options`, `parse_options_prefix` and `parse_options_subcommand`
  run a full parse. These functions handle abbreviated long options,
  `--no-` negation, bundled short switches, `-h`/`--help`/`--help-all`,
  `--list-opts` and `--list-cmds`. A help request exits with status 0. An
  unknown option exits with status 129. `ParseFlag` controls how the parse
  runs.
- `accutil.cli`: top-level argument handling for a tool with several
  commands. `main_handle_options` deals with `--version`/`-v`, `--help`/`-h`
  and `--list-cmds`, and with unknown commands. It returns only when the
  first argument names a known `Command`. `main_handle_internal_command`
  runs the named command. It raises `ValueError` if no command has that
  name.
- `accutil.manpage`: `help_show_man_page` replaces the process with a
  manual page viewer. It first tries the viewer named in an environment
  variable (`ACCFG_MAN_VIEWER` by default), then `man`. It prefixes
  `MANPATH` through `setup_man_path`. `cmd_to_page` turns a command name
  into a page name.
- `accutil.size`: `parse_size64` and `parse_size64_units` turn sizes such
  as `4k`, `0x10M` or `1G` into byte counts. They raise `ValueError` on
  malformed input. The module also has `align`, `align_down` and the `SZ_*`
  constants.
- `accutil.bitmap`: `Bitmap`, a fixed-size bit array with `set`, `clear`,
  `test_bit`, `find_next_bit`, `find_next_zero_bit` and `is_full`. The two
  search methods return **one more than** the index of the bit they find,
  capped at the bitmap size. When no bit is found they return the bitmap
  size.
- `accutil.sysfs`: `read_attr` and `write_attr` read and write attributes.
  `device_parse` calls a callback for each entry of a device directory.
  `devpath_to_devname` returns the last component of a device path.
  Failures raise `SysfsError`, a subclass of `OSError`.
- `accutil.names`: `scan_device_type_id` splits `"dsa0"` into
  `("dsa", 0)`. `scan_parent_child_names` splits `"dsa0/wq0.1"` into
  `("dsa0", "wq0.1")`. `scan_parent_child_ids` splits `"wq0.1"` into
  `(0, 1)`.
- `accutil.jsonfmt`: pretty-printed JSON text for listings. In human mode
  (`JsonFlag.HUMAN`) a `SizeValue` is shown in MiB/GiB form. A `HexValue`
  is always shown as a quoted hex string. The module also has
  `format_size`, `format_hex`, `bitmask_to_string`, `to_json_text` and
  `display_json_array`.
- `accutil.log`: `LogContext` writes messages as `owner: fn: message` to
  stderr and filters them by syslog priority. An environment variable can
  set the priority as a number or as a name (`err`, `info`, `debug`,
  `notice`). `log_priority` does that conversion.
- `accutil.util`: error reporting and path helpers. `die` exits with status
  128 and `usage` exits with status 129. `error`, `warning` and
  `set_die_routine` cover the rest of the reporting. `prefixcmp`,
  `skip_prefix`, `prefix_filename` and `fix_filename` are the string and
  path helpers.

## Example

    from accutil.size import parse_size64
    from accutil.bitmap import Bitmap
    from accutil.names import scan_parent_child_names

    parse_size64("4k")                      # 4096

    bits = Bitmap(128)
    bits.set(3, 10)                         # bits 3..12
    bits.test_bit(3)                        # True
    bits.find_next_bit(0)                   # 4  (bit 3 found)
    bits.find_next_zero_bit(3)              # 14 (bit 13 found)

    scan_parent_child_names("dsa0/wq0.1")   # ("dsa0", "wq0.1")

## What this package does not do

The package has no command of its own and installs no scripts. It does not
model devices, groups, work queues or engines. `accutil.names` only splits
names into their parts and does not look up whether a device exists.
`accutil.jsonfmt` renders data that you pass in but does not read device
state to build listings. Reading and writing the accelerator configuration
itself is left to the program that uses these helpers.