from makr.cli import main

main()
