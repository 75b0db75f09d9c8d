from ifstat.cli import entry

entry()
