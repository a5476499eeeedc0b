from depsnap.cli import main

main()
