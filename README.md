# wsx

`wsx` models git worktrees and the tmux sessions that live in them as one
tree: projects, then worktrees, then sessions. The package holds that
model, thin wrappers around the `tmux` command line, and the content of
the terminal views (tree rows, preview panes, dialogs, help text) as
plain data. None of it depends on a terminal toolkit.

## Modules

- `wsx.workspace`: the data model (`WorkspaceState`, `Project`,
  `WorktreeInfo`, `SessionInfo`, `GitInfo`, `CommitSummary`,
  `ProjectConfig`). `flatten_tree` turns a workspace into visible rows
  (`FlatEntry` with an `EntryKind`) according to each project's and
  worktree's `expanded` flag. `canonical_session_slug` and
  `session_display_name_from_tmux` handle session naming.
- `wsx.tmux`: runs `tmux` to create, rename and kill sessions
  (`create_session`, `rename_session`, `kill_session`), check for them
  (`session_exists`, `unique_session_name`), send keys (`send_keys`,
  `send_ctrl_c`), attach (`attach_session_cmd`, `switch_client`,
  `attach_foreground`) and capture panes (`capture_pane`, `trim_capture`).
  `session_activity` reads bell, last-activity and running-app state for
  every session; `parse_activity` and `parse_session_paths` parse the
  command output on their own. Failures are raised as `TmuxError`.
- `wsx.ops`: `create_session` makes a session named
  `{project}-{worktree slug}-{name}` and returns the tmux name and the
  display name; `update_activity` applies `SessionStatus` data to a
  workspace and reports whether a bell or running-app flag changed.
  `IDLE_SECS` (3) is the window in which a session counts as active.
- `wsx.ansi`: `parse` turns text with ANSI SGR escapes into `Line`s of
  styled `Span`s (bold, dim, italic, underline; 4-bit, 256 and RGB
  colours).
- `wsx.layout`: `Rect`, `popup_center`, `popup_upper`, status-bar hint
  wrapping (`wrap_hints`) and the wrapped help text (`help_lines`).
- `wsx.input`: `InputState`, a single-line editor with cursor movement
  and, in path mode, fuzzy directory completion (`path_completions`).
- `wsx.overlays`: placement and lines of the confirm dialog, the git
  menu and the project config view, plus a wrapping list `PickerState`.
- `wsx.preview`: lines of the preview pane for a worktree, a project or
  a session capture (`session_preview` also returns the scroll offset
  that shows the bottom of the capture).
- `wsx.tree_view`: sidebar rows (`tree_lines`), idle-time formatting
  (`fmt_idle`) and the scroll offset that keeps the selection in view
  (`compute_scroll`).

## Example

```python
from pathlib import Path

from wsx.ansi import parse
from wsx.workspace import canonical_session_slug, session_display_name_from_tmux

canonical_session_slug("wsx", Path("/tmp/wsx-feature-auth"))
# 'feature-auth'

session_display_name_from_tmux("wsx-wsx-agent", "wsx", Path("/tmp/wsx"), "main", None)
# 'agent'

lines = parse("\x1b[1;31merror\x1b[0m: build failed\n")
lines[0].text
# 'error: build failed'
```

Names made by older layouts (branch or alias slugs in place of the
worktree slug) are still recognised by `session_display_name_from_tmux`.

## What it does not do

There is no command to run and no interactive screen: the package gives
the content of the views, not a program that draws them or reads keys.
It does not list, create or remove git worktrees, read git status, load
or save project registrations, or read per-project config files; the
`WorkspaceState` and its `GitInfo` and `ProjectConfig` values must be
filled in by the caller.

## Requirements

Python 3.10 or later, with no third-party dependencies. The functions in
`wsx.tmux` and the session functions in `wsx.ops` need the `tmux` binary
on `PATH`.