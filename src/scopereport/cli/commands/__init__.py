# topmark:header:start
#
#   project      : ScopeReport
#   file         : __init__.py
#   file_relpath : src/scopereport/cli/commands/__init__.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""ScopeReport CLI subcommands (``check``, ``config``, ``version``)."""
