"""
Login Example

Logs into a site through its form, then scans the landing page.
"""
import asyncio

from pagelens.core.auth.login import FormLoginHandler
from pagelens.core.browser.playwright_driver import launch_driver
from pagelens.core.dom.resolver import ElementResolver
from pagelens.core.dom.scanner import PageScanner
from pagelens.core.models.config import Config, LoginConfig, LoginWait


async def main():
    config = Config()
    resolver = ElementResolver(config.resolver)

    login = LoginConfig(
        login_url="https://the-internet.herokuapp.com/login",
        username="tomsmith",
        password="SuperSecretPassword!",
        wait_for_login=LoginWait(type="url", value="/secure"),
    )

    async with launch_driver(headless=False) as driver:
        result = await FormLoginHandler(resolver, config.auth).login(driver, login)
        print(f"Logged in at {result.url} (submit via {result.submitted_by})")

        model = await PageScanner(config.scanner, resolver=resolver).scan(driver)
        for element in model.interactive:
            print(f"{element.id:30} {element.css_selector}")


if __name__ == "__main__":
    asyncio.run(main())
