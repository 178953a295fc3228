# swifttools

Small command-line tools for everyday text and filesystem work:

- `fcut` pulls fields out of delimited data and logs.
- `ffind` finds files by name, path, type, extension, size and age.
- `fdu` adds up the size of the files under directories.

The package also holds a value type that follows awk's conversion and
comparison rules (`swifttools.awk_value.Value`).

## Installation

```
pip install .
```

To run the tests:

```
pip install .[test]
pytest
```

## fcut

```
fcut -f 1,3 data.csv
fcut -f 2-4 -t data.tsv
fcut -f name,city --header -d , people.csv
fcut -f 1,2 -c --format json people.csv
cat access.log | fcut -f 1,7 -s
```

Fields are given as 1-based indices (`1,3`), inclusive ranges (`5-7`) or,
together with `--header`, header names (`name,age`). Indices come out
first, then ranges, then names. A range running past the end of a line is
cut short at the last field.

The input is split with:

- `-d DELIM`: any delimiter string,
- `-t`: tabs,
- `-s`: runs of whitespace,
- `-c`: CSV with quoting.

Only one of these may be given. Without any of them each line is split on
commas, tabs or whitespace, whichever is most frequent in that line.

Output:

- `--format text|csv|json`: the output format (text by default).
- `-o DELIM`: the output delimiter. It defaults to the input delimiter, or
  to a tab for text and a comma for CSV when none was given.
- `-n`: put the line number first.
- `--header`: treat the first line as column names and print it as a
  header. Add `--no-header` to use the names without printing them. In
  JSON output the fields are then keyed by header name.
- `--skip-lines N`, `--max-lines N`: skip the first N lines, and stop
  after N lines.
- `--non-empty`: ignore blank lines.
- `--color auto|always|never`: colour the output. `auto` colours it only
  on a terminal.

Lines that lack a requested field are left out of the output. With `-v` a
message for each of them is printed to standard error, together with
progress notes. With no files, standard input is read. Several files are
processed one after another.

## ffind

```
ffind . --name '*.py'
ffind src --iname '*.MD' --type f
ffind . --ext rs,py --size +10k
ffind . --mtime -1 --long
ffind . --empty --count
ffind . --name 'test_.*' -E --json --stats
```

Filters, all of which must accept an entry:

- `--name`, `--iname`, `--path`, `--ipath`: shell patterns (`*`, `?`,
  `[...]`) on the file name or the whole path. The `i` forms ignore case.
  With `-E` these are regular expressions that may match anywhere.
- `--type f|d|l`: file type (also `file`, `dir`, `directory`, `symlink`).
- `--ext rs,py` and `--not-ext log`: extensions to keep or to leave out,
  compared without regard to case.
- `--size [+|-|=]N[c|b|k|M|G|T]`: size greater than, less than or equal
  to N bytes, 512-byte blocks, KiB, MiB, GiB or TiB.
- `--empty`: empty files and empty directories.
- `--mtime`, `--atime`, `--ctime` `[+|-|=]N`: age in whole days.
  `--ctime` uses the creation time where the platform reports one, and
  the modification time otherwise.
- `--newer FILE`: modified after FILE.

Traversal:

- `--max-depth`, `--min-depth`: depth limits.
- `-H`: include hidden entries, which are skipped by default.
- `--no-ignore`: do not skip entries listed in `.gitignore`, `.ignore` and
  `.git/info/exclude` files.
- `-L`: follow symbolic links. Loops are detected and reported.
- `--mount`: descend into other filesystems.
- `-j N`: number of worker threads.

Output:

- `--long`: permissions, size and modification time (UTC) before each path.
- `-0`: separate paths with null characters.
- `--json`: print results and statistics as JSON.
- `--count`: print only the number of matches.
- `--stats`: print statistics after the search.
- `--sort`, `-r`: sort results by path, optionally in reverse.
- `--no-color`: disable colours. Colours are only used on a terminal.

Setting the `FFIND_VERBOSE` environment variable prints progress messages
to standard error.

## fdu

```
fdu
fdu -h /var/log
fdu -d 2 src docs
```

Prints the total size in bytes of the regular files under each path
(the current directory by default). `-h` prints the size in
human-readable units, `-d N` descends at most N levels, and `-j N` sets
the number of threads used to stat files.

## Using the awk value type

```python
from swifttools.awk_value import Value

Value.string("123abc").to_number()          # 123.0
Value.number(42.0).to_str()                 # "42"
Value.string("10").compare(Value.string("9"))  # 1: both look numeric
Value.number(10).divide(Value.number(0))    # raises DivisionByZeroError
```

`Value` holds a string, a number, an associative array or nothing. It
provides awk's string, numeric and boolean conversions, comparison,
arithmetic, concatenation and array access.

## What is not included

- There is no awk command. Only the value type is provided; there is no
  parser or interpreter for awk programs.
- `fdu` prints one total per path. It has no per-directory breakdown, and
  its `-s` option changes nothing.
- The `fcut` options `-z`, `-j` and `--buffer-size`, and the `ffind`
  options `--max-open` and `--print`, are accepted but do not change what
  is printed.