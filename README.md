# mmlogscrub

mmlogscrub removes identifying information from Mattermost log files, so that the logs can be
shared for troubleshooting. It handles each line on its own. Blank lines are dropped. If a JSON
line is still valid JSON after scrubbing, the scrubbed line is written, with its field order
unchanged. If scrubbing would make the line invalid JSON, the original line is written. Lines
that are not JSON objects are scrubbed as plain text.

## What gets scrubbed

The level decides which passes run:

| Level | Emails    | Usernames | IPv4 addresses    | IDs (20+ lowercase letters/digits)              |
|-------|-----------|-----------|-------------------|-------------------------------------------------|
| 1     | `[email]` | `userN`   | kept              | kept                                            |
| 2     | `[email]` | `userN`   | `***.***.***.N`   | kept                                            |
| 3     | `[email]` | `userN`   | `***.***.***.***` | 18 `*` followed by the last 8 characters        |

- Every email address that matches is replaced with the literal text `[email]`.
- A username is the value of a JSON `"user"` or `"username"` key. It is replaced with `userN`.
  The same username, compared without regard to case, always gets the same `N`.
- When a username and an email appear together in one JSON object, they are registered as one
  user with a single number. Nested objects and arrays are searched for such pairs too.

## Command line

```
mmlogscrub -i mattermost.log -l 1
mmlogscrub --input mattermost.log --level 2 --output clean.log
mmlogscrub -i mattermost.log -l 3 --dry-run --verbose
```

`python -m mmlogscrub.cli` runs the same command.

Flags can be given with one dash or two. A value can follow the flag as the next argument or
after `=`, for example `--level=2`.

- `-i`, `--input`: the input log file. Required.
- `-l`, `--level`: the scrubbing level, 1, 2 or 3. Required.
- `-o`, `--output`: the output file. The default is `<input>_scrubbed<ext>`, for example
  `mattermost_scrubbed.log`.
- `-a`, `--audit`: the audit CSV file. The default is `<input>_audit.csv`, for example
  `mattermost_audit.csv`.
- `--dry-run`: process the file but write neither the output nor the audit file.
- `-v`, `--verbose`: print each mapping as it is created. On a dry run, also print one line for
  each line that would be scrubbed. Verbose mode does not show the progress counter.
- `--version`: print `mattermost-log-scrubber v0.3.1` and exit.
- `-h`, `--help`: print usage and exit.

The exit status is 0 on success. It is 1 when the input is missing, the level is invalid, or
the files cannot be read or written. It is 2 when the flags cannot be parsed.

### Audit file

The audit file is a CSV with the header `Original Value,New Value,Times Replaced,Type`. It has
one row for each distinct original value, in the order the values were first seen. The type is
`email`, `username`, `ip` or `uid`. The audit file holds the original values, so do not share it.

## Library use

```python
from mmlogscrub.scrubber import Scrubber

scrubber = Scrubber(level=2)
line = '{"user":"alice","email":"alice@example.com","ip":"10.0.0.7"}'
print(scrubber.process_line(line))
# {"user":"user1","email":"[email]","ip":"***.***.***.7"}

stats = scrubber.process_file("mattermost.log", "clean.log", dry_run=False)
print(stats.total, stats.processed, stats.empty)
scrubber.write_audit_file("audit.csv")
```

A `Scrubber` holds its mappings for as long as it exists, so pseudonyms stay the same across
lines and files. Its `user_mappings` and `audit_entries` dictionaries can be inspected
directly. Progress and verbose messages go to `sys.stdout`, or to the stream passed as `out`.

The masking rules for single values can also be used on their own:
`scrub_email`, `scrub_username`, `scrub_ip` and `scrub_uid` in `mmlogscrub.levels`.

`mmlogscrub.models` provides `MattermostLogEntry.from_json`, which parses a JSON log line into
typed fields (`user`, `email`, `ip`, `team_id`, `post`, ...) and keeps the raw text.

## Limitations

- All email addresses are replaced with the same `[email]` text. The output alone cannot tell
  different addresses apart. Only the audit file can.
- Only dotted IPv4 addresses are recognised. IPv6 addresses pass through unchanged.
- Usernames are found only as `"user"` or `"username"` JSON string values. A name that appears
  elsewhere in free text is not detected.
- One file is processed per run. There is no directory or stream mode.

## Development

```
pip install -e ".[test]"
pytest
```