import json
import sys
from pathlib import Path

# Add project root to path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from socgen.model.design import DesignConfig
from socgen.model.settings import GeneratorSettings


def generate_schema():
    output_dir = project_root / "schemas"
    output_dir.mkdir(parents=True, exist_ok=True)

    # Configurator document (design.json)
    design_schema = DesignConfig.model_json_schema(by_alias=True)
    with open(output_dir / "design_config.schema.json", "w") as f:
        json.dump(design_schema, f, indent=2)
        f.write("\n")
    print(f"Generated {output_dir / 'design_config.schema.json'}")

    # Generator settings (--settings YAML)
    settings_schema = GeneratorSettings.model_json_schema(by_alias=True)
    with open(output_dir / "generator_settings.schema.json", "w") as f:
        json.dump(settings_schema, f, indent=2)
        f.write("\n")
    print(f"Generated {output_dir / 'generator_settings.schema.json'}")


if __name__ == "__main__":
    generate_schema()
