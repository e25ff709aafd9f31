"""
Jinja2 templates for the TypeScript backend.
"""

HEADER = "// Code generated by sdkgen. DO NOT EDIT.\n"

CLIENT_TEMPLATE = """{{ header }}
/**
 * Version of the API this client was generated from.
 */
export const schemaVersion = "{{ schema_version }}"

{% for scalar in scalars %}
{% if scalar.description %}
{{ scalar.description | comment }}
{% endif %}
export type {{ scalar.name }} = string

{% endfor %}
{% for enum in enums %}
{% if enum.description %}
{{ enum.description | comment }}
{% endif %}
export enum {{ enum.name }} {
{% for value in enum["values"] %}
{% if value.description %}
{{ value.description | comment | indent_lines(2) }}
{% endif %}
  {{ value.name }} = "{{ value.name }}",
{% endfor %}
}

{% endfor %}
{% for union in unions %}
{% if union.description %}
{{ union.description | comment }}
{% endif %}
export type {{ union.name }} = {{ union.members | join(" | ") }}

{% endfor %}
{% for interface in interfaces %}
{% if interface.description %}
{{ interface.description | comment }}
{% endif %}
export interface {{ interface.name }} {
{% for field in interface.fields %}
{% if field.description %}
{{ field.description | comment | indent_lines(2) }}
{% endif %}
  {{ field.name }}{% if field.optional %}?{% endif %}: {{ field.type }}{% if field.optional %} | null{% endif %}

{% endfor %}
}

{% endfor %}
{% if bundle_dependencies %}
{% include "deps_block.ts.j2" %}
{% endif %}
"""

DEPS_TEMPLATE = """{{ header }}
{% include "deps_block.ts.j2" %}
"""

DEPS_BLOCK_TEMPLATE = """/**
 * A module served automatically when the client connects.
 */
export interface ModuleDependency {
  kind: string
  name: string
  pin: string
  source: string
}

/**
 * Dependencies to serve, in order.
 */
export const moduleDependencies: ModuleDependency[] = [
{% for dep in dependencies %}
  { kind: {{ dep.kind | tojson }}, name: {{ dep.name | tojson }}, pin: {{ dep.pin | tojson }}, source: {{ dep.source | tojson }} },
{% endfor %}
]
"""

MODULE_GLUE_TEMPLATE = """{{ header }}
export { schemaVersion } from "./client.gen"

/**
 * Name of this module.
 */
export const moduleName = "{{ module_name }}"

/**
 * Marks a class as a module object.
 */
export function object() {
  return (target: Function): void => {}
}

/**
 * Marks a method as a module function.
 */
export function func() {
  return (target: object, propertyKey: string | symbol): void => {}
}

/**
 * Functions found in the module source, by object.
 */
export const moduleFunctions: Record<string, string[]> = {
{% for object in objects %}
  {{ object.name | tojson }}: [{% for method in object.methods %}{{ method | tojson }}{% if not loop.last %}, {% endif %}{% endfor %}],
{% endfor %}
}
"""

STARTER_TEMPLATE = """/**
 * A generated module for {{ object_name }} functions
 */
import { func, object } from "../sdk/module.gen"

@object()
export class {{ object_name }} {
  /**
   * Returns a greeting for the given name
   */
  @func()
  hello(name: string): string {
    return "Hello, " + name.trim()
  }
}
"""

PACKAGE_JSON_TEMPLATE = """{
  "name": {{ package_name | tojson }},
  "type": "module",
  "private": true,
  "dependencies": {
    "typescript": "{{ typescript_version }}"
  }
}
"""

TSCONFIG_TEMPLATE = """{
  "compilerOptions": {
    "target": "ES2022",
    "module": "NodeNext",
    "moduleResolution": "NodeNext",
    "experimentalDecorators": true,
    "strict": true,
    "skipLibCheck": true
  }
}
"""

TS_TEMPLATES = {
    "client.gen.ts.j2": CLIENT_TEMPLATE,
    "deps.gen.ts.j2": DEPS_TEMPLATE,
    "deps_block.ts.j2": DEPS_BLOCK_TEMPLATE,
    "module.gen.ts.j2": MODULE_GLUE_TEMPLATE,
    "index.ts.j2": STARTER_TEMPLATE,
    "package.json.j2": PACKAGE_JSON_TEMPLATE,
    "tsconfig.json.j2": TSCONFIG_TEMPLATE,
}
