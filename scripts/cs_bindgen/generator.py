"""
Main generator module

Orchestrates all components to generate complete C# bindings from
dear_bindings metadata.
"""

import os
import shutil
from collections import Counter
from dataclasses import dataclass, field
from typing import Optional

from .arrays import ArraySizeResolver
from .callback import DelegateSynthesizer
from .context import Options, ResolutionContext
from .defines import DefineEvaluator
from .definitions import CSharpClass, CSharpDefinition, CSharpFile
from .enum import EnumGenerator
from .func import FuncGenerator
from .ir import Metadata, TypedefItem
from .overload import OverloadGenerator
from .passes import CommentPass, NamingPass, TypesPass
from .struct import StructGenerator
from .types import TypeResolver
from .writer import CodeWriter

STRUCTS_DIR = 'Structs'

CONSTANTS_USINGS = ['System']
ENUMS_USINGS = ['System']
STRUCT_USINGS = ['System', 'System.Numerics', 'System.Runtime.CompilerServices', 'System.Text']
NATIVE_USINGS = ['System', 'System.Numerics', 'System.Runtime.InteropServices']
DELEGATE_USINGS = ['System', 'System.Numerics', 'System.Runtime.InteropServices']
MAIN_USINGS = ['System', 'System.Numerics', 'System.Runtime.InteropServices', 'System.Text']

CLASS_MODIFIERS = ['public', 'static', 'unsafe', 'partial']


@dataclass
class Configuration:
    """One metadata file and where its bindings go"""
    metadata_file: str
    namespace: str
    main_class: str
    native_class: str
    output_subdir: str = ''
    usings: list[str] = field(default_factory=list)


class Generator:
    """Main binding generator"""

    def __init__(self, metadata_root: str, output_root: str, options: Optional[Options] = None):
        self.metadata_root = metadata_root
        self.output_root = output_root
        self.options = options or Options()
        self.context: Optional[ResolutionContext] = None
        self._configurations: list[Configuration] = []

    @property
    def configurations(self) -> list[Configuration]:
        return list(self._configurations)

    def configuration(self, metadata_file: str, namespace: str, main_class: str, native_class: str,
                      output_subdir: str = '', usings=()) -> Configuration:
        """Register a generation pass"""
        config = Configuration(metadata_file, namespace, main_class, native_class,
                               output_subdir, list(usings))
        self._configurations.append(config)
        return config

    def prepare(self):
        """Recreate the output directory"""
        print('=== Generating C# bindings:')
        if os.path.exists(self.output_root):
            shutil.rmtree(self.output_root)
        os.makedirs(self.output_root)

    def generate_all(self) -> list[str]:
        """Run every configuration against one shared context"""
        self.prepare()
        self.context = ResolutionContext(self.options)
        written = []
        for config in self._configurations:
            written.extend(self.generate_configuration(config))
        return written

    def generate_configuration(self, config: Configuration) -> list[str]:
        """Generate and write the files of one configuration"""
        if self.context is None:
            self.context = ResolutionContext(self.options)
        context = self.context

        metadata_path = os.path.join(self.metadata_root, config.metadata_file)
        print(f'  {metadata_path} => {config.namespace}')
        metadata = Metadata.load(metadata_path)

        context.begin_configuration()
        resolver = TypeResolver(context)
        evaluator = DefineEvaluator(context)
        arrays = ArraySizeResolver(context)
        delegates = DelegateSynthesizer(context, resolver)
        enums = EnumGenerator(context, resolver, evaluator)
        funcs = FuncGenerator(context, resolver, evaluator, delegates)
        structs = StructGenerator(context, resolver, evaluator, arrays, delegates, funcs)

        constants = enums.generate_constants(metadata.defines)
        enum_defs = [e for e in (enums.generate(item) for item in metadata.enums) if e is not None]
        self._generate_typedefs(metadata.typedefs, resolver, evaluator, delegates)

        view_overloads = OverloadGenerator(context, resolver, config.native_class)
        struct_defs = []
        for item in metadata.structs:
            pair = structs.generate(item, metadata.functions, view_overloads)
            if pair is not None:
                struct_defs.append(pair)

        native_class = CSharpClass(config.native_class, modifiers=list(CLASS_MODIFIERS))
        for func in metadata.functions:
            method = funcs.generate(func)
            if method is not None:
                native_class.add(method)

        main_class = CSharpClass(config.main_class, modifiers=list(CLASS_MODIFIERS))
        main_overloads = OverloadGenerator(context, resolver, config.native_class, is_static=True)
        main_overloads.begin()
        for func in metadata.functions:
            if not func.name.startswith(self.options.main_function_prefix):
                continue
            if funcs.should_skip(func) is not None:
                continue
            main_class.definitions.extend(main_overloads.generate(func))

        struct_defs = TypesPass(context).run(struct_defs)
        context.resolve_pending()

        files = self._place_files(config, constants, enum_defs, struct_defs, native_class,
                                  list(context.delegates.values()), main_class)
        definitions = [d for f in files for d in f.definitions]
        CommentPass().run(definitions)
        NamingPass().run(definitions)

        output_dir = os.path.join(self.output_root, config.output_subdir)
        writer = CodeWriter(context, resolver)
        written = [writer.write_file(f, output_dir) for f in files]
        self._print_skipped()
        return written

    def _generate_typedefs(self, typedefs: list[TypedefItem], resolver: TypeResolver,
                           evaluator: DefineEvaluator, delegates: DelegateSynthesizer):
        for typedef in typedefs:
            if not evaluator.evaluates(typedef.conditionals):
                self.context.skip('typedef', typedef.name, 'conditionals')
                continue
            desc = typedef.type.description
            if desc.is_function_pointer:
                delegates.register(desc.inner_type.inner_type, desc.name or typedef.name, typedef.comments)
                continue
            if 'flags' in typedef.name.lower():
                self.context.skip('typedef', typedef.name, 'flags enum')
                continue
            self.context.register_type(typedef.name, resolver.resolve(desc))

    def _place_files(self, config: Configuration, constants: CSharpClass, enums, structs,
                     native_class: CSharpClass, delegates, main_class: CSharpClass) -> list[CSharpFile]:
        extra = list(config.usings)

        def new_file(file_name: str, usings: list[str], definitions: list[CSharpDefinition],
                     subdir: str = '', header=()) -> CSharpFile:
            csharp_file = CSharpFile(file_name, config.namespace, usings + extra, subdir=subdir,
                                     header=list(header))
            for definition in definitions:
                csharp_file.add(definition)
            return csharp_file

        files = [
            new_file('Constants.gen.cs', CONSTANTS_USINGS, [constants]),
            new_file('Enums.gen.cs', ENUMS_USINGS, enums),
        ]
        for layout, view in structs:
            files.append(new_file(f'{layout.name}.gen.cs', STRUCT_USINGS, [layout], STRUCTS_DIR))
            files.append(new_file(f'{view.name}.gen.cs', STRUCT_USINGS, [view], STRUCTS_DIR))
        files.append(new_file(f'{config.native_class}.gen.cs', NATIVE_USINGS, [native_class]))
        files.append(new_file('Delegates.gen.cs', DELEGATE_USINGS, delegates))
        files.append(new_file(f'{config.main_class}.gen.cs', MAIN_USINGS, [main_class],
                              header=['// ReSharper disable InconsistentNaming']))
        return files

    def _print_skipped(self):
        skipped = self.context.skipped
        if not skipped:
            return
        reasons = Counter(reason for _, _, reason in skipped)
        details = ', '.join(f'{reason}: {count}' for reason, count in reasons.items())
        print(f'  skipped {len(skipped)} items ({details})')
