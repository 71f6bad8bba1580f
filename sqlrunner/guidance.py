"""Troubleshooting hints picked by matching known phrases in driver errors.

Rules are checked in order against the lowercased error text and the first
match wins. Add a rule by appending a ``GuidanceRule`` to ``RULES``.
"""

from dataclasses import dataclass
from typing import Optional, Tuple

FILE_NOT_FOUND_TIPS = """\
- Check the database file path
- Make sure the database file exists
- Make sure you have permission to read the file"""

AUTHENTICATION_TIPS = """\
- Check the user name and password
- Check that the login has access to the database
- Check Integrated Security in the connection string"""

INSTANCE_TIPS = """\
Troubleshooting 'Instance failure':

1. Check the instance name:
   - Named instance: Server=HOST\\INSTANCE
   - Default instance: Server=HOST (no \\INSTANCE)
   - Example: Data Source=HOST\\SQL2022

2. Check the SQL Server service:
   - Open services.msc (Win+R, services.msc)
   - Find SQL Server (INSTANCE) or SQL Server (MSSQLSERVER)
   - Make sure Status is Running; if stopped, right-click and Start

3. Check SQL Server Configuration Manager:
   - SQL Server Services, SQL Server (INSTANCE)
   - Make sure Status is Running

4. Check SQL Server Browser (named instances):
   - Find SQL Server Browser in services.msc
   - Status should be Running and Startup Type Automatic

5. Test the connection:
   - Open SQL Server Management Studio (SSMS)
   - Connect to HOST\\INSTANCE
   - If SSMS connects, re-check the connection string

6. Connection string format:
   - A doubled backslash (HOST\\\\INSTANCE) is accepted and collapsed
   - Full example:
     Data Source=HOST\\SQL2022;Initial Catalog=MyDb;Integrated Security=True;

7. List the instances on the machine:
   - SSMS Connect to Server shows the available instances
   - PowerShell: Get-Service | Where-Object {$_.DisplayName -like '*SQL Server*'}"""

TIMEOUT_TIPS = """\
- Increase Connect Timeout in the connection string
- Check that the server is reachable
- The query may be running too long"""


@dataclass(frozen=True)
class GuidanceRule:
    name: str
    any_of: Tuple[str, ...]
    text: str
    requires: Tuple[str, ...] = ()

    def matches(self, message: str) -> bool:
        if self.requires and not all(word in message for word in self.requires):
            return False
        return any(phrase in message for phrase in self.any_of)


RULES = (
    GuidanceRule(
        "file_not_found",
        ("unable to open", "could not find", "no such file"),
        FILE_NOT_FOUND_TIPS,
    ),
    GuidanceRule(
        "authentication",
        ("login failed", "authentication", "cannot open database"),
        AUTHENTICATION_TIPS,
    ),
    GuidanceRule("instance_failure", ("instance failure",), INSTANCE_TIPS),
    GuidanceRule(
        "server_not_found",
        ("not found", "cannot connect", "could not open a connection"),
        INSTANCE_TIPS,
        requires=("server",),
    ),
    GuidanceRule("timeout", ("timeout",), TIMEOUT_TIPS),
)


def match_rule(message) -> Optional[GuidanceRule]:
    """Return the first rule matching ``message``, or None."""
    if not message:
        return None
    lowered = message.lower()
    for rule in RULES:
        if rule.matches(lowered):
            return rule
    return None


def guidance_for(message) -> Optional[str]:
    """Return the troubleshooting text for an error message, if any."""
    rule = match_rule(message)
    return rule.text if rule else None
