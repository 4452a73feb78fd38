from autopush.cli.app import main

main()
