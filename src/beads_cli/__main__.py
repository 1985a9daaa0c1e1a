from beads_cli import main

main()
