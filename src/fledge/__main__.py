from fledge.cli import main

main()
