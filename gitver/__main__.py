from gitver.cli.app import main

main()
