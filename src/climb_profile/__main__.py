from climb_profile.cli import main

main()
