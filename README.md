# sscctools

A small set of tools for working with SSCC (Serial Shipping Container Code)
numbers, plus a helper that reconfigures the network when the Wi-Fi changes.

## Installation

```
pip install sscctools
```

For running the test suite:

```
pip install "sscctools[test]"
pytest
```

## Check digits

An SSCC is 18 digits: 17 digits of data followed by a GS1 check digit.
Digits at even positions (counted from 0 on the left) weigh 3, the others 1.

```python
from sscctools.check import calculate_check_digit, complete_sscc

calculate_check_digit("13597920999999982")   # 5
complete_sscc("13597920999999982")           # "135979209999999825"
```

`calculate_check_digit` and `complete_sscc` raise `ValueError` if the input is
not exactly 17 characters long or holds anything other than digits.
`calculate_luhn` returns the Luhn check digit for any digit string, and also
raises `ValueError` on non-digit characters.

From the command line, `sscc-check` takes an optional 17-digit body (it uses
`13597920999999982` when none is given) and prints the full code:

```
sscc-check 13597920999999982
Full SSCC: 135979209999999825
```

On invalid input it prints the error to standard error and exits with status 1.

## Generating codes

`sscc-generate` builds the SSCCs for serial numbers 100000000 to 100009999
with extension digit `1` and company prefix `1111110`, and writes them one per
line to `/tmp/sscc.txt`.

```
sscc-generate
```

From Python the range, digits and number of worker threads can be chosen.
`generate_codes` yields codes in serial order; `write_codes` writes them and
returns how many it wrote.

```python
from sscctools.generate import generate_codes, write_codes

codes = generate_codes(100_000_000, 100_000_099, "1", "1111110", 4)
write_codes("codes.txt", codes)   # 100
```

`sscctools.generate.main(["codes.txt"])` writes the default range to another
file.

## Loading codes into MySQL

`sscc-insert` reads `/tmp/sscc.txt` in batches of 200 lines, inserts each batch
into the `lc_sscc` table in one transaction using 16 worker threads, tries each
batch up to 3 times, and appends batches that still fail to `failed.log`. When
done it checks that the file was not changed during the load (SHA-256) and
that the table's row count matches the number of lines in the file, printing
the outcome and exiting with 0 on success, 1 otherwise.

```
sscc-insert
```

Run without arguments, the command connects with the DSN
`user:password@tcp(localhost:3306)/db_name?parseTime=true&timeout=30s`. To use
another database or file, call `main` from Python with the DSN and the input
path:

```python
from sscctools.insert import main

main(["user:password@tcp(localhost:3306)/shipping?timeout=10s", "codes.txt"])
```

DSNs take the form `user:password@net(address)/dbname?params`. `parse_dsn`
turns one into connection arguments: `tcp`, `tcp4`, `tcp6` and `unix`
networks are accepted; the `timeout`, `readTimeout`, `writeTimeout` and
`charset` parameters are used and others ignored. `connect` opens and pings a
connection.

The building blocks are available for your own scripts: `read_batches`,
`insert_batch` (raises `InsertError` after rolling back), `BatchInserter`
(its `process` method returns the batches that failed every retry),
`calculate_file_hash`, `count_file_lines`, `save_failed_batch` and
`validate_consistency`.

## Switching network settings on Wi-Fi change

On macOS, `sscc-switch-network` watches the system Wi-Fi preferences file
`/Library/Preferences/SystemConfiguration/com.apple.wifi.message-tracer.plist`.
When it is modified or removed, the current SSID is read with
`ipconfig getsummary en0`; if it differs from the last one seen, the tool
prints `WiFi changed to <ssid>` and applies a configuration:

- `Hairou_KUBO1015`: a static address, an extra route (via `sudo route`) and a
  fixed DNS server;
- any other network: DHCP, with the interface's own address as DNS server.

It runs until interrupted with Ctrl-C.

```
sscc-switch-network
```

`sscctools` starts the same watcher and ignores any arguments:

```
sscctools
```

From Python, `extract_ssid`, `get_current_ssid` (raises `SSIDNotFoundError`
when no SSID is found), `run_custom_script`, `default_network` and
`switch_network(path)` are in `sscctools.network`.

## What it does not do

The commands take no options for ranges, prefixes, batch sizes or worker
counts; those are fixed and can only be changed by calling the Python
functions. The network switcher knows only the networks listed above and
works only on macOS, where `ipconfig`, `networksetup` and `route` exist.