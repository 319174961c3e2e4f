from dxship.main import main

main()
