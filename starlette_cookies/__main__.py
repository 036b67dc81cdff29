from starlette_cookies.cli import main

main()
