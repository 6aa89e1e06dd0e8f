# tinyshell

tinyshell holds the core pieces of a small POSIX-flavoured command shell:

- `tinyshell.env`: the shell environment (`Environment`, `EnvVar`) and
  the running state (`Context`), with `init_env` adding a default `PATH`
  and raising `SHLVL` the way a starting shell does;
- `tinyshell.variables`: `$NAME` and `$?` expansion, field splitting on
  blanks (`split_by_ifs`, `expand_variables`) and here-document line
  expansion (`expand_variable_heredoc`);
- `tinyshell.wildcard`: `*` and `?` matching (`wildcard_lazy_match`) and
  expansion of words against the entries of a directory
  (`expand_wildcards`);
- `tinyshell.expansion`: quote removal (`expand_quotes`) and the full
  expansion pipeline `expand`: variables, then wildcards, then quotes;
- `tinyshell.builtins`: the builtins `cd`, `echo`, `env`, `exit`,
  `export`, `pwd` and `unset`, with `run_builtin` to dispatch by name.
  `exit` raises `ShellExit` carrying the status instead of ending the
  process.

It has no third-party dependencies and needs Python 3.10 or later.

## Examples

Matching a wildcard pattern against a name:

```python
from tinyshell.wildcard import wildcard_lazy_match

wildcard_lazy_match("file1", "**fi**le1*")   # True
wildcard_lazy_match("file1", "*11")          # False
```

Expanding command words:

```python
from tinyshell.env import Context, Environment
from tinyshell.expansion import expand, expand_quotes

ctx = Context(env=Environment.from_envp(["GREET=hello world"]))
expand(["$GREET"], ctx)          # ['hello', 'world']
expand(['"$GREET"'], ctx)        # ['hello world']
expand_quotes("TheNameIs\"Alice\",And'Bob'.")   # 'TheNameIsAlice,AndBob.'
```

Building the start-up environment:

```python
from tinyshell.env import init_env

env = init_env(["HOME=/home/user"])
env.value("PATH")    # '/usr/local/bin:/usr/local/sbin:/usr/bin:/usr/sbin:/bin:/sbin:.'
env.value("SHLVL")   # '1'
```

Running builtins:

```python
from tinyshell.builtins import ShellExit, normalize_path, run_builtin

normalize_path("/a/b/../c")                       # '/a/c'
run_builtin(["export", "NAME=value"], ctx)        # 0
ctx.env.value("NAME")                             # 'value'
try:
    run_builtin(["exit", "42"], ctx)
except ShellExit as stop:
    stop.status                                   # 42
```

## What it does not do

tinyshell has no command to start and no interactive prompt. It does not
read or parse command lines, and it does not run external programs,
pipelines, subshells, redirections or here-documents; it provides the
environment, expansion and builtin pieces that such a shell is built on.

## Running the tests

Install the package with its `test` extra and run `pytest` from the
project directory.