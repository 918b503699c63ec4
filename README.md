# pubdatahub

pubdatahub is a Python library with the building blocks for working with
public data sources. It has:

- a client for the public **Hacker News** API, with a token bucket rate limiter;
- loading and saving of a small JSON configuration file;
- a JSON HTTP API server that lists sources, serves paged data and takes job
  control requests;
- a command parser, handler registry and shell glue for an interactive command
  language.

It uses only the standard library.

## Configuration (`pubdatahub.config`)

Settings live in `config.json` in the configuration directory.
`default_config_dir()` returns the value of the `PUBDATAHUB_CONFIG_PATH`
environment variable when it is set. Otherwise it returns `~/.pubdatahub`.

```python
from pubdatahub.config import init_config, set_storage_path

config = init_config()              # or init_config("/some/dir")
print(config.storage_path, config.config_file)
set_storage_path("/path/to/storage")
```

`init_config` creates the directory and a default `config.json` if no file
exists yet. The default storage path is `<config dir>/data`. It also creates the
storage directory and returns a `Config`.

`set_storage_path` rewrites the `storage_path` setting in an existing file.
Both functions raise `ConfigError` on failure.

## Hacker News client (`pubdatahub.hackernews`)

```python
from pubdatahub.hackernews.client import Client

client = Client()
print(client.get_max_item_id())
item = client.get_item(1)           # an Item, or None when the API returns null
items = client.get_items_batch(1, 10)
client.close()
```

- `Client` takes an optional `base_url`, a `timeout` (30 seconds by default)
  and a `rate_limiter`. Without a rate limiter it allows 10 requests per second.
- `get_items_batch` fetches every id from the start id to the end id
  inclusive, and skips items that are missing.
- Errors raise `ClientError`.
- Every method accepts an optional `threading.Event` as `cancel`. Setting it
  stops the wait.

`Item.from_dict` builds an item from decoded JSON. It checks the field types
and ignores unknown keys.

`RateLimiter(rate, interval)` holds `rate` tokens and refills one every
`interval / rate` seconds. `wait()` blocks until a token is free. It raises
`RateLimiterCancelled` when the event is set or the limiter has been closed.
The limiter is also a context manager.

## HTTP API (`pubdatahub.api`)

`ApiServer(address, job_manager)` serves the API on a background thread.
`address` is `host:port`. You supply `job_manager`: it is any object with
`list_jobs()`, `pause_job(job_id)` and `resume_job(job_id)`, as described by
the `JobManager` protocol in `pubdatahub.api.jobs`. `list_jobs()` returns
`JobInfo` values.

```python
from pubdatahub.api.server import ApiServer

class Jobs:
    def list_jobs(self):
        return []
    def pause_job(self, job_id):
        pass
    def resume_job(self, job_id):
        pass

server = ApiServer("127.0.0.1:8080", Jobs())
server.start()
# ...
server.stop()
```

`dispatch(method, path, body)` routes a single request without a socket and
returns a `Response` with `status`, `headers` and `body`.

| Method | Path | Result |
| ------ | ---- | ------ |
| any | `/health` | `{"status": "ok", "timestamp": ...}` |
| GET | `/api/sources` | The available sources (`hackernews`) |
| GET | `/api/sources/hackernews/data?page=1&limit=20` | A page of items with `total_items`, `total_pages`, `current_page`, `items_per_page`; any other source gives 404 |
| GET | `/api/jobs` | The job manager's jobs |
| POST | `/api/jobs/download` | Body `{"source": "hackernews"}`; returns a queued job record with a new id (201), or 400 for a missing source or invalid JSON |
| POST | `/api/jobs/<job_id>/pause` | Calls `pause_job` |
| POST | `/api/jobs/<job_id>/resume` | Calls `resume_job` |

Any other request gets the plain text `PubDataHub API Server`.

The pagination is available on its own as `pubdatahub.api.sources.paginate`. A
page past the end returns the last page.

## Command language (`pubdatahub.command`)

`Parser` parses command lines against registered `CommandSpec`s. It supports:

- quoted arguments and backslash escapes;
- long flags (`--count 42`) and short flags (`-c 42`);
- combined boolean short flags such as `-vc 10`;
- `string`, `int`, `float` and `bool` flag types;
- defaults, required flags and limits on the number of arguments.

Errors raise `ParseError`. An unknown command raises `UnknownCommandError`.

```python
from pubdatahub.command.parser import CommandSpec, FlagSpec, Parser

parser = Parser()
parser.register_command(
    CommandSpec(
        name="fetch",
        min_args=1,
        max_args=1,
        flags={"count": FlagSpec(type="int", short="c")},
    )
)
command = parser.parse('fetch "some source" --count 42')
print(command.name, command.args, command.flags)
print(parser.get_command_help("fetch"))
```

`HandlerRegistry` ties specs to `Handler` subclasses. It runs commands and
offers tab completions. `SuggestionEngine` suggests close command names.

`ShellIntegration` puts these together with the built-in `help` and `exit`
commands. `exit` has the aliases `quit` and `q`.

- `process_command(text)` records the input in the session history and runs
  it.
- `exit` raises `ExitRequested`.
- Failures raise `CommandError`. For an unknown command, the message ends with
  `Did you mean: ...` when there are close matches.

```python
from pubdatahub.command.integration import ShellIntegration

shell = ShellIntegration()
shell.process_command("help")
print(shell.get_completions("he"))
```

## What it does not do

- There is no command-line program and no interactive shell loop. You use the
  package from Python.
- Downloaded items are not stored. There is no local database, no batch
  downloader and no SQL querying of downloaded data.
- The `/api/sources/hackernews/data` endpoint serves a fixed set of 20 sample
  stories, not downloaded data.
- `POST /api/jobs/download` only returns a queued job record. No download job is
  run.
- No job manager is included; you supply one to `ApiServer`.
- Only `help` and `exit` are registered in `ShellIntegration`. Other commands
  have to be registered as your own handlers.

## Running the tests

Install the `test` extra, then run pytest from the project root.