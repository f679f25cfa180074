from composeports.main import main

main()
