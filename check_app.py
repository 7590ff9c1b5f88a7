import sys
import os

# Add the service directory to sys.path
sys.path.append(os.path.join(os.getcwd(), "services/units"))

try:
    from creamery_units.main import app
    print("App imported successfully")

    # Check routes
    expected = ["/api/units/convert", "/api/units/categories", "/api/units/scale"]
    paths = [route.path for route in app.routes if hasattr(route, "path")]

    missing = [p for p in expected if p not in paths]
    for p in expected:
        if p not in missing:
            print(f"Found route: {p}")

    if missing:
        print(f"ERROR: Routes NOT FOUND: {', '.join(missing)}")
        sys.exit(1)

except Exception as e:
    print(f"App import failed: {e}")
    import traceback
    traceback.print_exc()
    sys.exit(1)
