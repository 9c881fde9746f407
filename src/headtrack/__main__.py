from headtrack.cli import main

main()
