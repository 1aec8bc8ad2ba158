"""Run all selftests.

Usage:
  python -m selftest.run_all
"""

import importlib


TEST_MODULES = [
    'selftest.test_expr_compiler',
    'selftest.test_effect_compiler',
    'selftest.test_project_io',
    'selftest.test_spawner',
    'selftest.test_bake_export',
    'selftest.test_project_validation',
    'selftest.test_project_manager',
]


def main():
    failures = []
    for modname in TEST_MODULES:
        try:
            m = importlib.import_module(modname)
            m.main()
        except Exception as e:
            failures.append((modname, e))

    if failures:
        print("\nFAILED:")
        for modname, e in failures:
            print(f"- {modname}: {type(e).__name__}: {e}")
        raise SystemExit(1)

    print("\nOK: all selftests passed")


if __name__ == "__main__":
    main()
