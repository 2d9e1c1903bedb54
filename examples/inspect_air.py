import sys

from airgrab import CivitaiClient, get_category, parse_air


def main():
    resource = parse_air(sys.argv[1])
    print(f"model {resource.model_id}, version {resource.version_id}, format {resource.format or '-'}")

    if not resource.has_version:
        print("No version in the AIR, nothing to look up.")
        return

    with CivitaiClient() as client:
        version = client.get_model_version(resource.version_id)
        model = client.get_model(version.model_id)

    print(f"{model.name} / {version.name} ({model.type})")
    print(f"category: {get_category(model.tags)}")
    primary = version.primary_file()
    print(f"primary file: {primary.name if primary else 'none'}")
    print(f"images: {len(version.images)}")


if __name__ == "__main__":
    main()
