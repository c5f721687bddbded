# landkit

Building blocks for running a small WebAssembly function platform: project
templates and `land.toml` metadata, Traefik routing configuration for
workers, review of deployment tasks, worker synchronisation, storage
settings and Prometheus traffic queries.

## Installation

```
pip install landkit
```

For running the tests:

```
pip install "landkit[test]"
pytest
```

## Command line

The `land-cli` command creates new projects from a directory of project
templates:

```
land-cli new my-project --template js-hello --desc "My first function" --assets ./examples
land-cli --version
```

Templates are not shipped with the package. `--assets` names the directory
that holds them; it defaults to the `LAND_EXAMPLES_DIR` environment variable,
or `examples` in the current directory. A template lives in a sub-directory
named after its link (for example `js-hello/`) and must contain a
`land.toml`. Its files are copied into the new project directory, and the
project's `land.toml` gets the project name and the description (the
template's own description if none is given).

Project names may contain only letters, digits and `-`, and must start with a
letter. When the name, template or description is left out, `land-cli new`
asks for it on the terminal.

`land-cli build` (`-j/--js-engine`) and `land-cli up` (`--listen`, `--build`,
`-j/--js-engine`) accept and validate their options but do nothing else yet;
`--listen` must be an `ip:port` socket address and defaults to
`127.0.0.1:9830`.

Global options: `-V/--version` prints the version, `-v/--verbose` turns on
debug logging, `-q/--quiet` is accepted as its opposite. The `LAND_LOG`
environment variable overrides the log level. Errors are printed as
`Something wrong: ...` with exit status 2; running without a command prints
the help and exits with 2.

## Library

Project metadata (`landkit.meta`):

```python
from landkit.meta import Data

data = Data.new_js()
data.to_file("land.toml")
print(Data.from_file("land.toml").target_wasm_path())  # src/index.js
```

Templates (`landkit.examples`):

```python
from landkit import examples

item = examples.get("js-hello")
source = item.get_source("./examples")          # None if the file is absent
item.extract("./examples", "my-project", "a description")
```

Traefik configuration for a deployed function (`landkit.traefik`):

```python
from landkit.traefik import ConfItem, build

item = ConfItem(user_id=1, project_id=2, deploy_id=3, task_id="t1",
                file_name="p/a.wasm", download_url="http://localhost/a.wasm",
                file_hash="0123abcd", domain="demo.example.com")
print(build(item, "land-worker@docker").to_yaml())
```

Traffic queries against Prometheus (`landkit.traffic`):

```python
from landkit.traffic import PeriodParams, PrometheusClient, Settings

client = PrometheusClient(Settings(endpoint="http://localhost:9090"))
period = PeriodParams.for_period("1d")        # "7d" for a week
series = client.requests_traffic("12", None, period)
```

`request_ql`, `flow_ql`, `projects_traffic_ql` and `projects_flows_ql` build
the PromQL text, and `line_series_from` turns a range-query response into
`LineSeries` values. Bad answers raise `PrometheusError`.

Deployment review (`landkit.review`):

```python
from landkit.review import TaskState, TaskStatus, review_tasks

outcome = review_tasks([TaskState(TaskStatus.SUCCESS)], total_count=1)
outcome.succeeded       # True
outcome.deploy_message  # "Success"
```

A task count that differs from `total_count` raises `ReviewError`; failure
messages are cut to 255 bytes by `truncate_message`.

Storage settings (`landkit.storage`), kept in any mutable mapping:

```python
from landkit.storage import StorageConfig, StorageForm

config = StorageConfig()
config.init_defaults()
config.build_url("p/a.wasm")   # "/download/p/a.wasm"
config.update_by_form(StorageForm(checked="s3", endpoint="https://s3.example.com",
                                  bucket="wasm"))
config.build_url("p/a.wasm")   # "https://s3.example.com/wasm/p/a.wasm"
```

Worker sync (`landkit.agent`):

```python
from landkit.agent import fetch_ip_info, sync_once

info = fetch_ip_info("10.0.0.5")
items = sync_once("http://127.0.0.1:9840", "token", "./data", info)
```

`sync_once` returns `None` when the server answers 304, otherwise writes the
received items to `confs.json` in the directory and returns them; errors
raise `SyncError`.

`landkit.common` holds `rand_string`, `obj_hash` (MD5 of compact JSON),
`get_hostname`, `short_version`, `print_version` and `init_logging`.

## What the package does not do

landkit has no web dashboard, admin pages or worker API server, no database
layer and no background loops that poll or refresh state. It does not compile
JavaScript to WebAssembly, upload files to a storage backend, download
modules, or run them; `land-cli build` and `land-cli up` only parse their
options.