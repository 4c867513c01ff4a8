from ocunit2junit.cli import main_entry

main_entry()
