from shuttletrack.cli import main

main()
