# stackdump

`stackdump` records the call stack of the running Python thread as a sequence
of frames. It can write that sequence to a file, a file descriptor or a
writable buffer as a flat array of pointer-sized words, read such a dump back,
and print it as a numbered list.

Each frame is identified by an integer address. The address stands for a code
location, that is a function name, a source file and a line number. It is
allocated the first time that location is seen and stays the same for the
rest of the process. Address 0 means "no frame" and marks the end of a dump.

## Installation

```
pip install stackdump
```

## Capturing and printing a stack

```python
from stackdump.stacktrace import Stacktrace, to_string

trace = Stacktrace()            # the whole current stack, innermost first
print(to_string(trace))         # " 0# my_func at /path/file.py:12\n 1# ..."

for frame in trace:
    print(frame.name(), frame.source_file(), frame.source_line())
```

- `Stacktrace(skip=0, max_depth=None)` leaves out the `skip` innermost frames
  and keeps at most `max_depth` frames. `None` means no limit.
  `Stacktrace(0, 0)` is empty. A negative argument raises `ValueError`.
- A trace supports `len()`, indexing, slicing, iteration and `reversed()`.
  `as_list()` returns its frames as a new list. `empty()` and `bool()` tell
  you whether any frame was captured.
- Two traces are equal when they hold the same frame addresses. Ordering
  compares the length first and then the frames. Traces are hashable.

`stackdump.frame.Frame(address)` wraps one address. You can also pass a
function instead of an address, and the frame then refers to that function's
definition. `name()`, `source_file()` and `source_line()` give `""`, `""` and
`0` for an address they do not know. `empty()` is true for address 0. Frames
compare and hash by address. `to_string(frame)` describes a single frame, and
`format_frames(frames)` gives the numbered listing. A frame whose location is
unknown is shown as a zero-padded hex address such as `0x0000000000001000`.

## Dumping the stack and reading it back

```python
from stackdump.collect import safe_dump_to_file
from stackdump.stacktrace import Stacktrace, to_string

safe_dump_to_file("./backtrace.dump", skip=0, max_depth=128)

with open("./backtrace.dump", "rb") as stream:
    previous = Stacktrace.from_stream(stream)
print(to_string(previous))
```

- `safe_dump_to_file(path, skip, max_depth)` creates or truncates the file
  with mode `0o600`. `safe_dump_to_fd(fd, skip, max_depth)` writes to a
  descriptor that is already open. Both store at most `MAX_FRAMES_DUMP`
  (128) frames and a zero terminator. They return the number of words
  written, terminator included, or 0 on failure.
- `safe_dump_to_buffer(buffer, skip)` fills a writable buffer such as a
  `bytearray` or a `memoryview`. It returns the number of words stored, or 0
  if the buffer is smaller than one word.
- `Stacktrace.from_stream(stream)` reads from the current position of a
  seekable binary stream. `Stacktrace.from_buffer(buffer)` reads raw bytes.
  Both stop at the first zero word and read at most 1024 words
  (`frames_count_from_buffer_size`).
- The lower-level pieces are also available: `collect(max_frames_count, skip)`
  returns addresses, and `dump_to_fd` / `dump_to_file` write a list of
  addresses.

## Attaching a trace to an exception

```python
from stackdump.recipes import throw_with_trace, get_trace, format_numbered

try:
    throw_with_trace(ValueError("'i' must be less than 4"))
except ValueError as exc:
    trace = get_trace(exc)      # None if the exception carries no trace
    if trace is not None:
        print(format_numbered(trace))
```

`TracedError` is an exception class that records its trace when it is
created. The trace is available as `exc.trace`. `format_numbered(trace)`
lists frames by name only. `dump_compact(trace)` returns just the addresses
in hex, each followed by a comma.

## Looking up native addresses with addr2line

`stackdump.addr2line.addr2line(flag, addr, exec_path=None)` runs
`/usr/bin/addr2line` for one address against a binary. By default that binary
is the running executable, read from `/proc/self/exe`. The function returns
the output with trailing line breaks removed, or `""` if the program cannot be
run. `parse_name`, `parse_source_file` and `parse_source_line` pick the output
apart, and treat `??` as unknown.

`stackdump.numconv` holds the formatting helpers `to_dec_array`,
`to_hex_array` and `try_dec_convert`. The last one behaves like `strtoul`: it
accepts leading whitespace and a sign, and returns `None` when anything is
left over.

## Demo

```
stackdump-demo [start]
```

The demo raises an error through a chain of nested calls. `start` defaults
to 5. The demo prints the error message and the trace recorded where the
error was raised. It exits with 0 when a trace was attached and 3 when none
was.

## Limitations

- Only Python frames of the calling thread are captured. Native stacks are
  not captured, and no signal or crash handler is installed for you.
- Addresses mean something only in the process that recorded them. A dump
  read back in another process still yields the same addresses. The names
  and file locations are not available there, so its frames print as hex
  addresses.

## Running the tests

```
pip install "stackdump[test]"
pytest
```