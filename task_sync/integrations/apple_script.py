"""
Runs JavaScript for Automation (JXA) scripts through osascript.

Scripts print a single JSON document to stdout, which is decoded and
returned. Dates come back as ISO-8601 strings (JSON.stringify of a JS Date)
and are normalized by the integration adapters.
"""

import asyncio
import json
import logging
from typing import Any, Protocol

from dateutil.parser import parse as parse_datetime

from task_sync.exceptions import ScriptExecutionError

logger = logging.getLogger(__name__)

SCRIPT_TIMEOUT = 30.0  # seconds


class ScriptRunner(Protocol):
    async def run_json(self, script: str, *args: str) -> Any:
        ...


class OsascriptRunner:
    """Executes JXA via ``osascript -l JavaScript``."""

    def __init__(self, executable: str = "osascript", timeout: float = SCRIPT_TIMEOUT):
        self.executable = executable
        self.timeout = timeout

    async def run_json(self, script: str, *args: str) -> Any:
        """
        Run a script and decode its JSON output.

        Args:
            script: JXA source defining ``run(argv)``
            *args: Arguments passed to ``run`` as argv

        Returns:
            Decoded JSON value

        Raises:
            ScriptExecutionError: On launch failure, timeout, non-zero exit,
                or output that is not JSON
        """
        try:
            process = await asyncio.create_subprocess_exec(
                self.executable, "-l", "JavaScript", "-e", script, *args,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
            )
        except OSError as e:
            raise ScriptExecutionError(f"Could not launch {self.executable}: {e}", original_error=e) from e

        try:
            stdout, stderr = await asyncio.wait_for(process.communicate(), self.timeout)
        except asyncio.TimeoutError as e:
            process.kill()
            await process.wait()
            raise ScriptExecutionError(
                f"Script timed out after {self.timeout}s", original_error=e
            ) from e

        if process.returncode != 0:
            message = stderr.decode("utf-8", errors="replace").strip()
            raise ScriptExecutionError(f"osascript exited with {process.returncode}: {message}")

        output = stdout.decode("utf-8").strip()
        try:
            return json.loads(output)
        except json.JSONDecodeError as e:
            logger.debug(f"Unreadable script output: {output[:200]}")
            raise ScriptExecutionError("Script returned invalid JSON", original_error=e) from e


# Reminders -------------------------------------------------------------------

REMINDER_LISTS_SCRIPT = """
function run(argv) {
  const app = Application("Reminders");
  return JSON.stringify(app.lists().map(function (l) {
    return { id: l.id(), name: l.name(), count: l.reminders.length };
  }));
}
"""

# argv[0]: JSON array of list names ("[]" = all lists), argv[1]: "true" to include completed
REMINDERS_SCRIPT = """
function run(argv) {
  const app = Application("Reminders");
  const wanted = JSON.parse(argv[0] || "[]");
  const includeCompleted = argv[1] === "true";
  const result = [];
  app.lists().forEach(function (l) {
    const listName = l.name();
    if (wanted.length && wanted.indexOf(listName) === -1) return;
    const items = includeCompleted ? l.reminders() : l.reminders.whose({ completed: false })();
    items.forEach(function (r) {
      result.push({
        id: r.id(),
        name: r.name(),
        body: r.body(),
        completed: r.completed(),
        completionDate: r.completionDate(),
        creationDate: r.creationDate(),
        modificationDate: r.modificationDate(),
        dueDate: r.dueDate(),
        alldayDueDate: r.alldayDueDate(),
        priority: r.priority(),
        list: { id: l.id(), name: listName }
      });
    });
  });
  return JSON.stringify(result);
}
"""

# Calendar --------------------------------------------------------------------

CALENDARS_SCRIPT = """
function run(argv) {
  const app = Application("Calendar");
  return JSON.stringify(app.calendars().map(function (c) {
    return { uid: c.calendarIdentifier(), name: c.name(), description: c.description() };
  }));
}
"""

# argv[0]/argv[1]: ISO range bounds, argv[2]: JSON array of calendar names ("[]" = all)
EVENTS_SCRIPT = """
function run(argv) {
  const app = Application("Calendar");
  const start = new Date(argv[0]);
  const end = new Date(argv[1]);
  const wanted = JSON.parse(argv[2] || "[]");
  const result = [];
  app.calendars().forEach(function (c) {
    const calName = c.name();
    if (wanted.length && wanted.indexOf(calName) === -1) return;
    const cal = { uid: c.calendarIdentifier(), name: calName, description: c.description() };
    c.events.whose({ _and: [{ startDate: { _lessThan: end } }, { endDate: { _greaterThan: start } }] })()
      .forEach(function (e) {
        result.push({
          uid: e.uid(),
          summary: e.summary(),
          description: e.description(),
          location: e.location(),
          startDate: e.startDate(),
          endDate: e.endDate(),
          alldayEvent: e.alldayEvent(),
          status: e.status(),
          url: e.url(),
          recurrence: e.recurrence(),
          stampDate: e.stampDate(),
          attendees: e.attendees().map(function (a) {
            return { displayName: a.displayName(), email: a.email(), participationStatus: a.participationStatus() };
          }),
          calendar: cal
        });
      });
  });
  return JSON.stringify(result);
}
"""


def parse_script_date(value: Any) -> Any:
    """
    Normalize a date value from script output.

    Empty values (None, "", "missing value") become None and date strings
    become datetimes. Anything else, including unparseable strings, is
    returned unchanged so record validation reports it against its field.
    """
    if value is None or value == "" or value == "missing value":
        return None
    if not isinstance(value, str):
        return value
    try:
        return parse_datetime(value)
    except (ValueError, OverflowError):
        logger.warning(f"Unparseable date from script: {value!r}")
        return value
