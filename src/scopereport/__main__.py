# topmark:header:start
#
#   project      : ScopeReport
#   file         : __main__.py
#   file_relpath : src/scopereport/__main__.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Allow ``python -m scopereport``."""

from scopereport.cli.main import cli

if __name__ == "__main__":
    cli()
