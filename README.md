# cowbot

Building blocks for a chat bot. It covers levelling and rank roles, and a set of UC Merced
campus lookups. Each feature comes as plain functions that parse arguments, scrape or decode
web data, query the database and build an `Embed` (a title, a description, fields, an
image, a footer and a timestamp). You connect these pieces to a chat client yourself.

## Installation

```
pip install .
pip install ".[test]"   # also installs pytest and responses
```

## Modules

- `cowbot.duration`: `to_ms` turns spans such as `"1d2h3m4s"` into milliseconds and returns
  `None` for an unknown unit. `from_ms` renders milliseconds as `"Xd Xh Xm Xs"` and drops
  the leading units that are zero.
- `cowbot.config`: `Config`, `parse_config(text)` and `load_config(path="config.json")`.
  `Config.lavalink_enabled()` is true when both `lavalink_ip` and `lavalink_password` are set.
- `cowbot.ranking_models`: `LevelUp`, `Experience`, `Member`, `FullMember`, `Rank`,
  `MemberPagination`.
- `cowbot.ranking_db`: `RankingDatabase(connection)` wraps a DB-API connection whose driver
  takes `?` placeholders. It provides experience (`provide_exp`), levels (`get_xp`,
  `calculate_level`), channel toggles (`toggle_channel_xp`, `channel_disabled`), a leaderboard
  of ten rows per page (`top_members`, `rank_within_members`), rank roles (`get_roles`,
  `add_role`, `remove_role`, `get_highest_role`), cooldowns (`set_timeout`, `get_timeout`)
  and `get_users`.
- `cowbot.embed`: `Embed` with `add_field(name, value, inline)`, and
  `level_up_embed(user_id, level_up, role_update_failed=False)`, which returns `None` when
  the level is negative.
- `cowbot.interaction`: `OptionKind`, `CommandOption`, `format_option` and
  `build_command_content(application_id, command_name, options)`. Together they turn a slash
  command into the text of a message that mentions the bot.
- `cowbot.course_models`: `Reminder`, `Trigger`, `Class`, `PartialClass`, the `Days` flags,
  `MeetingType`, `Meeting`, `Professor`, plus `fix_time`, `format_term` and
  `semester_from_text`.
- `cowbot.courses_db`: `CoursesDatabase`, which extends `RankingDatabase` with class, meeting,
  professor and reminder queries, and `create_full_text_query`.
- `cowbot.courses`: `parse_course_args`, `CourseQuery`, `course_embed`, `matches_embed` and
  `lookup_courses(db, args, today=None)`. `lookup_courses` answers with an `Embed` or a
  plain message.
- `cowbot.professors`: `current_term`, `professor_embed`, `professor_matches_embed` and
  `search_professors(db, search_query, today=None)`.
- `cowbot.reminders`: `reminders_embed`, `parse_add_args` (raises `ReminderArgumentError`),
  `add_reminder`, `remove_reminder`, `triggered_embed` and `check_reminders(db, notify)`.
  `check_reminders` makes one pass over triggered reminders, calls `notify(user_id, embed)`
  for each, and returns how many were sent.
- `cowbot.calendar_page`: `process_calendar`, `calendar_embed`, `academic_year`,
  `calendar_url` and `fetch_calendar`.
- `cowbot.gym`: `process_hours`, `hours_embed` and `fetch_hours`.
- `cowbot.foodtrucks`: `process_schedules`, `schedule_embed` and `fetch_schedule`.
- `cowbot.library`: the hours calendar records, `parse_calendar`, `library_url`,
  `library_embed` and `fetch_library_hours`.
- `cowbot.registrar`: the course search records, `parse_course_list`, `term_code`,
  `course_list_embed` and `fetch_course_list`.
- `cowbot.pav_models`: `Day`, `Meal`, the menu service records with their `parse_*`
  functions, `next_meal` and `is_yablokoff_dinner`.
- `cowbot.pavilion`: `BigZpoonClient` (a menu service client that can be used as a context
  manager), `parse_pavilion_args`, `PavilionRequest`, `week_number`, `process_announcement`,
  `process_bigzpoon`, `pavilion_times_embed`, `pavilion_embed` and `announcements_embed`.

The `fetch_*` functions and `BigZpoonClient` use `requests`. When a network request fails,
they raise the `requests` error.

## Examples

```python
from cowbot.duration import to_ms, from_ms
from cowbot.course_models import format_term, fix_time

to_ms("1h30m")        # 5400000
to_ms("5x")           # None: unknown unit
from_ms(90_000)       # "1m 30s"
format_term(202230)   # "Fall 2022"
fix_time("1330")      # "1:30 PM"
```

Parsing a page you have already downloaded needs no network access:

```python
from cowbot.calendar_page import process_calendar, calendar_embed

calendar = process_calendar(html_text)
if calendar is not None:
    embed = calendar_embed(calendar)
    print(embed.title)
```

Running one reminder pass:

```python
from cowbot.courses_db import CoursesDatabase
from cowbot.reminders import check_reminders

db = CoursesDatabase(connection)   # any DB-API connection using "?" placeholders
sent = check_reminders(db, lambda user_id, embed: print(user_id, embed.title))
```

Loading the configuration:

```python
from cowbot.config import load_config

config = load_config("config.json")
if config.lavalink_enabled():
    ...
```

The configuration file is a JSON object. It holds the strings `token`, `sql_server_ip`,
`sql_server_username`, `sql_server_password`, `cmd_prefix`, `lavalink_ip` and
`lavalink_password`, and the integer `sql_server_port`.

## What the package does not do

- It does not connect to a chat service, and it has no command to run. Sending embeds,
  dispatching commands and handling events are left to your client code.
- It does not run anything on a schedule. To check reminders regularly, call
  `check_reminders` yourself every `REMINDER_INTERVAL` seconds (60).
- It does not create the database, its tables or its stored procedures. The queries expect
  them to exist on a SQL Server reached through a driver you supply.
- It plays no audio. The `lavalink_*` settings are read, but only to report whether they
  are set.