from nulib.nulib import main

main()
