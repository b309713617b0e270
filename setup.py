from setuptools import find_packages, setup

# Top-level packages: the notifier core, its collaborator interfaces and the
# command line entrypoint.

package_list = find_packages(
  include=[
    "notifier",
    "notifier.*",
    "interfaces",
    "interfaces.*",
    "entrypoints",
    "entrypoints.*",
  ]
)

setup(
  name="notifier",
  version="0.1.0",
  description="Client for scheduled e-mail and SMS notifications with cron schedules",
  python_requires=">=3.11",
  packages=package_list,
  include_package_data=True,
  install_requires=[
    "pydantic>=2",
    "pyyaml",
    "python-dotenv",
    "platformdirs",
    "httpx",
    "jinja2",
  ],
  extras_require={
    "dev": ["pytest", "pytest-asyncio", "pytest-cov"],
  },
  entry_points={
    "console_scripts": [
      "notifier=entrypoints.notifier_cli:run",
    ],
  },
)
